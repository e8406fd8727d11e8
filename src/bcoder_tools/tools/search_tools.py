"""
Search tools: find files by name pattern and search text inside files.
"""

import logging
import re
import stat as stat_module
from pathlib import Path
from typing import Optional

from pydantic import Field

from bcoder_tools.tools import fs
from bcoder_tools.tools.base import BaseTool, ToolArguments
from bcoder_tools.tools.directory_tools import require_directory, walk_tree
from bcoder_tools.tools.exceptions import ToolError
from bcoder_tools.tools.models import SearchMatch, ToolResult

logger = logging.getLogger(__name__)

# Larger files are treated as non-text and skipped by content search
SEARCH_FILE_SIZE_LIMIT = 1024 * 1024  # 1 MB

CONTEXT_LINES = 2


def pattern_to_regex(pattern: str) -> re.Pattern:
    """
    Translate a glob-like filename pattern into an anchored regex.

    `*` matches any sequence and `?` any single character; everything else
    is literal. Matching is case-insensitive.

    Args:
        pattern: Filename pattern, e.g. "*.py" or "test_?.txt"

    Returns:
        Compiled regular expression
    """
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile(f"^{''.join(parts)}$", re.IGNORECASE | re.DOTALL)


def text_to_regex(query: str, case_sensitive: bool) -> re.Pattern:
    """Compile a literal text query."""
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(re.escape(query), flags)


class SearchFilesArgs(ToolArguments):
    pattern: str = Field(
        description="File name pattern to search for (supports * and ? wildcards)"
    )
    directory: Optional[str] = Field(
        default=None, description="Directory to search in (defaults to workspace root)"
    )
    recursive: bool = Field(default=True, description="Whether to search recursively")
    include_hidden: bool = Field(
        default=False, description="Whether to include hidden files"
    )


class SearchInFilesArgs(ToolArguments):
    query: str = Field(description="Text to search for")
    directory: Optional[str] = Field(
        default=None, description="Directory to search in (defaults to workspace root)"
    )
    file_pattern: str = Field(
        default="*", description='File name pattern to limit search (e.g., "*.py")'
    )
    case_sensitive: bool = Field(
        default=False, description="Whether the search should be case sensitive"
    )
    max_results: int = Field(
        default=100, ge=1, description="Maximum number of results to return"
    )


class SearchFilesTool(BaseTool):
    """Find files whose base name matches a glob-like pattern."""

    name = "search_files"
    description = "Search for files by name pattern"
    args_model = SearchFilesArgs

    def run(self, args: SearchFilesArgs) -> ToolResult:
        directory = self.authorize_directory(args.directory or str(self.workspace_root))
        require_directory(directory)

        regex = pattern_to_regex(args.pattern)
        results = [
            str(path)
            for path, st in walk_tree(
                self.gate,
                directory,
                recursive=args.recursive,
                include_hidden=args.include_hidden,
            )
            if stat_module.S_ISREG(st.st_mode) and regex.match(path.name)
        ]
        logger.info(f"Found {len(results)} files matching pattern: {args.pattern}")

        return ToolResult.ok(
            data={
                "pattern": args.pattern,
                "directory": str(directory),
                "results": results,
                "count": len(results),
            },
            message=f'Found {len(results)} files matching "{args.pattern}"',
        )


class SearchInFilesTool(BaseTool):
    """
    Search literal text inside files below a directory.

    Hidden entries are skipped, as are files larger than
    SEARCH_FILE_SIZE_LIMIT. The max_results ceiling bounds the whole scan:
    it stops at the first match past the ceiling. That match is dropped
    and only marks the result as truncated.
    """

    name = "search_in_files"
    description = "Search for text content within files"
    args_model = SearchInFilesArgs

    def run(self, args: SearchInFilesArgs) -> ToolResult:
        directory = self.authorize_directory(args.directory or str(self.workspace_root))
        require_directory(directory)

        file_regex = pattern_to_regex(args.file_pattern)
        search_regex = text_to_regex(args.query, args.case_sensitive)

        # One match past the ceiling tells whether anything was left out
        limit = args.max_results + 1
        results: list[SearchMatch] = []
        for path, st in walk_tree(self.gate, directory, recursive=True, include_hidden=False):
            if len(results) >= limit:
                break
            if not stat_module.S_ISREG(st.st_mode) or not file_regex.match(path.name):
                continue
            if st.st_size > SEARCH_FILE_SIZE_LIMIT:
                logger.debug(f"Skipping large file: {path} ({st.st_size} bytes)")
                continue
            self._search_file(path, search_regex, results, limit)

        truncated = len(results) > args.max_results
        if truncated:
            del results[args.max_results:]
            logger.warning(f"Reached max results ({args.max_results})")
        logger.info(f"Found {len(results)} matches for: {args.query}")

        return ToolResult.ok(
            data={
                "query": args.query,
                "directory": str(directory),
                "results": [match.model_dump() for match in results],
                "count": len(results),
                "truncated": truncated,
            },
            message=f'Found {len(results)} matches for "{args.query}"',
        )

    def _search_file(
        self,
        path: Path,
        regex: re.Pattern,
        results: list[SearchMatch],
        max_results: int,
    ) -> None:
        try:
            content = fs.read_text_lenient(path)
        except ToolError as e:
            logger.warning(f"Cannot read file: {path}: {e}")
            return

        lines = [line.rstrip("\r") for line in content.split("\n")]
        for index, line in enumerate(lines):
            position = 0
            while len(results) < max_results and position <= len(line):
                match = regex.search(line, position)
                if match is None:
                    break

                start = max(0, index - CONTEXT_LINES)
                end = min(len(lines), index + CONTEXT_LINES + 1)
                results.append(
                    SearchMatch(
                        path=str(path),
                        line=index + 1,
                        column=match.start() + 1,
                        content=line,
                        context="\n".join(lines[start:end]),
                    )
                )

                # A zero-width match must still move the scan forward
                position = match.end() if match.end() > match.start() else match.end() + 1

            if len(results) >= max_results:
                return

"""README parsing: usage examples, summary description, content cleanup.

Single-pass, heuristic Markdown handling, no grammar. Every public function
degrades instead of raising: extraction returns what it found so far, cleanup
returns its input unchanged.
"""

from __future__ import annotations

import re

import structlog

from vcpkg_readme.models.tools import UsageExample

log = structlog.get_logger()

LINK_BASE_URL = "https://github.com/Microsoft/vcpkg/blob/master/"

USAGE_SECTIONS: tuple[str, ...] = (
    "usage",
    "examples",
    "example",
    "quick start",
    "quickstart",
    "getting started",
    "how to use",
    "tutorial",
    "guide",
    "basic usage",
    "simple example",
    "sample code",
    "integration",
    "installation",
    "cmake",
    "vcpkg",
)

LANGUAGE_ALIASES: dict[str, str] = {
    "cpp": "cpp",
    "c++": "cpp",
    "cxx": "cpp",
    "cc": "cpp",
    "c": "c",
    "cmake": "cmake",
    "bash": "bash",
    "sh": "bash",
    "shell": "bash",
    "powershell": "powershell",
    "ps1": "powershell",
    "json": "json",
    "xml": "xml",
    "yaml": "yaml",
    "yml": "yaml",
    "makefile": "makefile",
    "make": "makefile",
    "dockerfile": "dockerfile",
    "text": "text",
    "txt": "text",
    "": "text",
}

_HEADING_RE = re.compile(r"^#{1,6}\s+")
_FENCE = "```"

_CMAKE_PATTERNS = (
    re.compile(r"find_package\([^)]+\)", re.IGNORECASE),
    re.compile(r"target_link_libraries\([^)]+\)", re.IGNORECASE),
    re.compile(r"vcpkg_install\([^)]+\)", re.IGNORECASE),
)
_MIN_CMAKE_MATCH_LENGTH = 10
_INCLUDE_RE = re.compile(r"#include\s*[<\"][^>\"]+[>\"]", re.IGNORECASE)
_MAX_INCLUDES = 5

_BADGE_RE = re.compile(r"\[!\[[^\]]*\]\([^)]*\)\]\([^)]*\)")
_HTML_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_BLANK_RUN_RE = re.compile(r"\n{3,}")
_RELATIVE_LINK_RE = re.compile(r"\[([^\]]+)\]\((?!https?://)([^)]+)\)")


def is_usage_section(section_name: str) -> bool:
    """True if the heading text matches the usage allow-list, in either direction."""
    name = section_name.lower()
    return any(section in name or name in section for section in USAGE_SECTIONS)


def generate_title(section_name: str) -> str:
    """``'quick start'`` → ``'Quick Start'``."""
    return " ".join(word[:1].upper() + word[1:] for word in section_name.split(" "))


def normalize_language(language: str) -> str:
    normalized = language.lower().strip()
    return LANGUAGE_ALIASES.get(normalized, normalized)


def parse_usage_examples(content: str) -> list[UsageExample]:
    """Extract usage examples from README Markdown.

    Fenced code blocks are emitted when they close inside a usage-like
    section, titled after the most recent usage-like heading. Free text in
    such a section becomes the example description. Afterwards CMake calls
    and ``#include`` lines are picked up anywhere in the text. The result is
    deduplicated by ``(title, code)``, keeping the first occurrence.
    """
    examples: list[UsageExample] = []

    try:
        current_section = ""
        in_code_block = False
        code_lines: list[str] = []
        language = ""
        title = ""
        description_lines: list[str] = []

        for line in content.split("\n"):
            if _HEADING_RE.match(line):
                heading = _HEADING_RE.sub("", line)
                current_section = heading.lower()
                if is_usage_section(current_section):
                    title = heading
                    description_lines = []
                continue

            if line.startswith(_FENCE):
                if not in_code_block:
                    in_code_block = True
                    language = line[len(_FENCE) :].strip() or "text"
                    code_lines = []
                    continue

                in_code_block = False
                code = "\n".join(code_lines).strip()
                if code and is_usage_section(current_section):
                    examples.append(
                        UsageExample(
                            title=title or generate_title(current_section),
                            description="\n".join(description_lines) or None,
                            code=code,
                            language=normalize_language(language),
                        )
                    )
                code_lines = []
                language = ""
                continue

            if in_code_block:
                code_lines.append(line)
                continue

            if is_usage_section(current_section) and line.strip() and not line.startswith("#"):
                description_lines.append(line)

        examples.extend(_extract_inline_examples(content, examples))
    except Exception:
        log.error("readme_parse_failed", exc_info=True)

    return _deduplicate(examples)


def _extract_inline_examples(content: str, fenced: list[UsageExample]) -> list[UsageExample]:
    """CMake calls and include lines found anywhere in the raw text.

    Matches whose text already appears in a fenced example are skipped.
    """
    fenced_code = "\n".join(example.code for example in fenced)
    examples: list[UsageExample] = []

    for pattern in _CMAKE_PATTERNS:
        for match in pattern.findall(content):
            if len(match) > _MIN_CMAKE_MATCH_LENGTH and match not in fenced_code:
                examples.append(UsageExample(title="CMake Integration", code=match, language="cmake"))

    includes = [match for match in _INCLUDE_RE.findall(content) if match not in fenced_code]
    if includes:
        examples.append(
            UsageExample(
                title="Include Headers",
                code="\n".join(includes[:_MAX_INCLUDES]),
                language="cpp",
            )
        )

    return examples


def _deduplicate(examples: list[UsageExample]) -> list[UsageExample]:
    seen: set[tuple[str, str]] = set()
    unique: list[UsageExample] = []
    for example in examples:
        key = (example.title, example.code)
        if key not in seen:
            seen.add(key)
            unique.append(example)
    return unique


def extract_description(content: str) -> str:
    """Return the text between the first and second headings.

    Leading blank lines and badge/image lines are skipped. Text in a README
    without any heading is returned as is.
    """
    try:
        description_lines: list[str] = []
        found_first_heading = False

        for line in content.split("\n"):
            stripped = line.strip()

            if not stripped:
                continue
            if stripped.startswith("[![") or stripped.startswith("!["):
                continue
            if stripped.startswith("#"):
                if found_first_heading:
                    break
                found_first_heading = True
                continue

            description_lines.append(stripped)

        return "\n".join(description_lines).strip()
    except Exception:
        log.error("readme_description_failed", exc_info=True)
        return ""


def cleanup_content(content: str) -> str:
    """Strip badges and HTML comments, squeeze blank runs, absolutize links."""
    try:
        cleaned = _BADGE_RE.sub("", content)
        cleaned = _HTML_COMMENT_RE.sub("", cleaned)
        cleaned = _BLANK_RUN_RE.sub("\n\n", cleaned)
        cleaned = _RELATIVE_LINK_RE.sub(rf"[\1]({LINK_BASE_URL}\2)", cleaned)
        return cleaned.strip()
    except Exception:
        log.error("readme_cleanup_failed", exc_info=True)
        return content

"""Language detection from file extensions."""

from __future__ import annotations

from pathlib import Path

EXTENSION_LANGUAGES: dict[str, str] = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".py": "python",
    ".rs": "rust",
    ".go": "go",
    ".java": "java",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".c": "c",
    ".h": "c",
    ".cs": "csharp",
    ".php": "php",
    ".rb": "ruby",
    ".swift": "swift",
    ".kt": "kotlin",
    ".scala": "scala",
    ".clj": "clojure",
    ".hs": "haskell",
    ".ml": "ocaml",
    ".fs": "fsharp",
    ".elm": "elm",
    ".dart": "dart",
    ".r": "r",
    ".jl": "julia",
    ".lua": "lua",
    ".pl": "perl",
    ".sh": "bash",
    ".ps1": "powershell",
    ".sql": "sql",
    ".svelte": "svelte",
    ".vue": "vue",
    ".html": "html",
    ".css": "css",
    ".scss": "scss",
    ".sass": "sass",
    ".less": "less",
    ".json": "json",
    ".xml": "xml",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".ini": "ini",
    ".cfg": "ini",
    ".conf": "conf",
    ".md": "markdown",
    ".rst": "rst",
    ".tex": "latex",
}

# Text files that carry no language tag but are still worth reading
PLAIN_TEXT_EXTENSIONS = {".txt", ".log", ".gitignore", ".dockerignore", ".editorconfig"}

STATICALLY_TYPED_LANGUAGES = frozenset(
    {
        "typescript",
        "rust",
        "go",
        "java",
        "cpp",
        "c",
        "csharp",
        "swift",
        "kotlin",
        "scala",
        "haskell",
        "ocaml",
        "fsharp",
        "elm",
        "dart",
    }
)


def _extension(path: Path | str) -> str:
    p = Path(path)
    # Dotfiles like .gitignore have no suffix, the name is the extension
    if not p.suffix and p.name.startswith("."):
        return p.name.lower()
    return p.suffix.lower()


def detect_language(path: Path | str) -> str | None:
    """Detect the language of a file from its extension.

    Returns:
        Language tag, or None when the extension is unknown
    """
    return EXTENSION_LANGUAGES.get(_extension(path))


def is_text_file(path: Path | str) -> bool:
    """Check whether a file's content is safe to read as text."""
    ext = _extension(path)
    return ext in EXTENSION_LANGUAGES or ext in PLAIN_TEXT_EXTENSIONS


def is_statically_typed(language: str | None) -> bool:
    """Check whether a language tag names a statically typed language."""
    return language is not None and language.lower() in STATICALLY_TYPED_LANGUAGES


__all__ = [
    "EXTENSION_LANGUAGES",
    "STATICALLY_TYPED_LANGUAGES",
    "detect_language",
    "is_text_file",
    "is_statically_typed",
]

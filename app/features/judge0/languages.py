"""Languages the playground can run, keyed by editor slug."""

from __future__ import annotations

from typing import Dict, List, Optional

from .schemas import LanguageInfo

DEFAULT_LANGUAGE = "javascript"


class LanguageConfig:
    def __init__(self, slug: str, judge0_id: int, name: str, mode: str, default_code: str) -> None:
        self.slug = slug
        self.judge0_id = judge0_id
        self.name = name
        self.mode = mode
        self.default_code = default_code

    def info(self) -> LanguageInfo:
        return LanguageInfo(id=self.judge0_id, slug=self.slug, name=self.name, mode=self.mode)


LANGUAGES: Dict[str, LanguageConfig] = {
    "javascript": LanguageConfig(
        "javascript", 63, "JavaScript (Node 12.14.0)", "javascript",
        '// JavaScript Example\nfunction greet(name) {\n  console.log(`Hello, ${name}!`);\n}\n\ngreet("World");',
    ),
    "typescript": LanguageConfig(
        "typescript", 74, "TypeScript (3.7.4)", "typescript",
        '// TypeScript Example\nfunction greet(name: string): void {\n  console.log(`Hello, ${name}!`);\n}\n\ngreet("World");',
    ),
    "cpp": LanguageConfig(
        "cpp", 54, "C++ (GCC 9.2.0)", "c_cpp",
        '#include <iostream>\nusing namespace std;\n\nint main() {\n    cout << "Hello, World!" << endl;\n    return 0;\n}',
    ),
    "c": LanguageConfig(
        "c", 50, "C (GCC 9.2.0)", "c_cpp",
        '#include <stdio.h>\n\nint main() {\n    printf("Hello, World!\\n");\n    return 0;\n}',
    ),
    "java": LanguageConfig(
        "java", 62, "Java (OpenJDK 13.0.1)", "java",
        'public class Main {\n    public static void main(String[] args) {\n        System.out.println("Hello, World!");\n    }\n}',
    ),
    "python": LanguageConfig(
        "python", 71, "Python (3.8.1)", "python",
        '# Python Example\ndef greet(name):\n    print(f"Hello, {name}!")\n\ngreet("World")',
    ),
    "sql": LanguageConfig(
        "sql", 82, "SQL (SQLite 3.27.2)", "sql",
        "-- SQL Example\nSELECT 'Hello, World!' AS greeting;",
    ),
}

ALL_LANGUAGES: List[str] = ["cpp", "c", "java", "python", "javascript", "sql", "typescript"]


def get_language(slug: Optional[str]) -> Optional[LanguageConfig]:
    if not slug:
        return None
    return LANGUAGES.get(slug)


def default_code(slug: Optional[str]) -> str:
    lang = get_language(slug)
    return lang.default_code if lang else ""


def list_languages(allowed: Optional[List[str]] = None) -> List[LanguageInfo]:
    slugs = allowed if allowed is not None else ALL_LANGUAGES
    return [LANGUAGES[s].info() for s in slugs if s in LANGUAGES]

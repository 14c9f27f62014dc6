import pytest

from gh_codeowners.errors import InvalidPatternError
from gh_codeowners.patterns import compile_pattern


@pytest.mark.parametrize(
    "pattern, path, expected",
    [
        # unanchored single segment matches at any depth
        ("README.md", "README.md", True),
        ("README.md", "docs/README.md", True),
        ("README.md", "a/b/README.md", True),
        ("README.md", "xREADME.md", False),
        ("README.md", "README.md/child.txt", True),
        # wildcard inside a segment
        ("*.md", "README.md", True),
        ("*.md", "docs/README.md", True),
        ("*.md", "docs/README.mdx", False),
        ("*.go", "main.go", True),
        ("*.go", "main.go.bak", False),
        ("*.go", "pkg/main.go", True),
        ("/*.go", "main.go", True),
        ("/*.go", "pkg/main.go", False),
        ("docs/*.md", "docs/a.md", True),
        ("docs/*.md", "docs/sub/a.md", False),
        ("docs/*.md", "x/docs/a.md", False),
        # single character wildcard
        ("file?.txt", "file1.txt", True),
        ("file?.txt", "src/file1.txt", True),
        ("file?.txt", "file10.txt", False),
        ("file?.txt", "file.txt", False),
        ("file?.txt", "file/.txt", False),
        # root anchor
        ("/build", "build", True),
        ("/build", "build/output.txt", True),
        ("/build", "src/build", False),
        ("/build", "buildx", False),
        # patterns with a slash are anchored to the root
        ("a/b/c", "a/b/c", True),
        ("a/b/c", "a/b/c/y", True),
        ("a/b/c", "x/a/b/c/y", False),
        ("a/b/c", "a/b/cd", False),
        # trailing slash
        ("vendor/", "vendor/lib/file.go", True),
        ("vendor/", "third_party/vendor/lib.go", True),
        ("vendor/", "vendor", False),
        ("foo/bar/", "foo/bar/x", True),
        ("foo/bar/", "x/foo/bar/x", False),
        ("foo/bar/", "foo/bar", False),
        # a lone * segment
        ("docs/*", "docs/a.md", True),
        ("docs/*", "docs/a/b.md", False),
        ("docs/*", "x/docs/a.md", False),
        ("apps/*/config", "apps/web/config", True),
        ("apps/*/config", "apps/web/config/prod.yml", True),
        ("apps/*/config", "apps/config", False),
        ("apps/*/config", "apps/a/b/config", False),
        ("*", "anything", True),
        ("*", "deep/down/file", True),
        # ** as the only, first, middle and last segment
        ("**", "a", True),
        ("**", "a/b/c", True),
        ("**", "", False),
        ("**/logs", "logs", True),
        ("**/logs", "a/b/logs/x.log", True),
        ("**/logs", "xlogs", False),
        ("a/**/b", "a/b", True),
        ("a/**/b", "a/x/b", True),
        ("a/**/b", "a/x/y/b", True),
        ("a/**/b", "a/xb", False),
        ("a/**/b", "ab", False),
        ("docs/**", "docs/a.md", True),
        ("docs/**", "docs/a/b.md", True),
        ("docs/**", "docs", False),
        ("/src/**", "src/main.go", True),
        ("/src/**", "lib/src/main.go", False),
        # regex metacharacters are literal
        ("a.b", "a.b", True),
        ("a.b", "aXb", False),
        ("(x)+", "(x)+", True),
        # backslash escapes the next character
        ("\\*.md", "*.md", True),
        ("\\*.md", "a.md", False),
        ("\\?", "?", True),
        ("\\?", "a", False),
        # character classes are not part of the grammar
        ("[ab].txt", "[ab].txt", True),
        ("[ab].txt", "a.txt", False),
        # "/" owns nothing
        ("/", "", False),
        ("/", "a", False),
        ("/", "a/b", False),
    ],
)
def test_pattern_table(pattern, path, expected):
    assert compile_pattern(pattern).matches(path) is expected


@pytest.mark.parametrize("pattern", ["***", "a/***/b", "****.md", ""])
def test_invalid_patterns_are_rejected(pattern):
    with pytest.raises(InvalidPatternError) as exc:
        compile_pattern(pattern)
    assert exc.value.pattern == pattern


def test_triple_asterisk_reason():
    with pytest.raises(InvalidPatternError, match="three consecutive asterisks"):
        compile_pattern("a/***/b")


def test_bytes_paths_are_accepted():
    p = compile_pattern("*.md")
    assert p.matches(b"docs/README.md")
    assert not p.matches(b"docs/README.txt")


def test_compilation_is_deterministic():
    uncached = compile_pattern.__wrapped__
    a = uncached("src/**/*.py")
    b = uncached("src/**/*.py")
    assert a is not b
    assert a.regex.pattern == b.regex.pattern
    for path in ["src/a.py", "src/x/y/a.py", "lib/a.py", "src/a.pyc"]:
        assert a.matches(path) == b.matches(path)
        assert a.matches(path) == a.matches(path)


def test_whole_path_must_match():
    p = compile_pattern("src/app")
    assert p.matches("src/app")
    assert not p.matches("src/application")
    assert not p.matches("lib/src/app")

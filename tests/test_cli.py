"""End-to-end tests for the command line."""

from __future__ import annotations

from pathlib import Path

import pytest

from mdchain.cli import main


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a stray site.toml in the working directory out of the tests."""
    monkeypatch.chdir(tmp_path)


def write_post(directory: Path, name: str, title: str, date: str, body: str = "Body") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(f"---\ntitle: {title}\ndate: {date}\n---\n{body}\n", encoding="utf-8")
    return path


class TestDirectoryMode:
    """Tests for rendering a directory of posts."""

    def test_single_post(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = tmp_path / "posts"
        src.mkdir()
        (src / "hello.md").write_text("---\ntitle: Hello\ndate: 2024-01-01\n---\n# Hi\n", encoding="utf-8")

        main([str(src)])

        pages = sorted(src.glob("*.html"))
        assert [p.name for p in pages] == ["hello.html"]
        page = pages[0].read_text(encoding="utf-8")
        assert "<title>Hello</title>" in page
        assert '<h1 class="text-3xl font-bold">Hi</h1>' in page
        assert 'rel="prev"' not in page
        assert 'rel="next"' not in page
        assert "Wrote 1 page." in capsys.readouterr().out

    def test_three_posts_are_chained(self, tmp_path: Path) -> None:
        src = tmp_path / "posts"
        write_post(src, "c.md", "Third", "2024-01-03")
        write_post(src, "a.md", "First", "2024-01-01")
        write_post(src, "b.md", "Second", "2024-01-02")

        main([str(src)])

        first = (src / "a.html").read_text(encoding="utf-8")
        middle = (src / "b.html").read_text(encoding="utf-8")
        last = (src / "c.html").read_text(encoding="utf-8")
        assert 'rel="prev"' not in first
        assert 'href="b.html" rel="next"' in first
        assert 'href="a.html" rel="prev"' in middle
        assert 'href="c.html" rel="next"' in middle
        assert 'href="b.html" rel="prev"' in last
        assert 'rel="next"' not in last

    def test_malformed_post_does_not_stop_batch(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "posts"
        write_post(src, "a.md", "A", "2024-01-01")
        write_post(src, "b.md", "B", "2024-01-02")
        write_post(src, "c.md", "C", "2024-01-03")
        (src / "broken.md").write_text("no front matter\n", encoding="utf-8")

        main([str(src)])

        assert len(list(src.glob("*.html"))) == 3
        assert not (src / "broken.html").exists()
        captured = capsys.readouterr()
        assert "Skipping" in captured.err
        assert "skipped 1 post" in captured.out
        # The malformed post is not a neighbor of anything.
        assert "broken.html" not in (src / "a.html").read_text(encoding="utf-8")

    def test_write_failure_does_not_stop_batch(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "posts"
        write_post(src, "a.md", "A", "2024-01-01")
        write_post(src, "b.md", "B", "2024-01-02")
        write_post(src, "c.md", "C", "2024-01-03")
        (src / "b.html").mkdir()

        main([str(src)])

        assert (src / "a.html").is_file()
        assert (src / "c.html").is_file()
        captured = capsys.readouterr()
        assert "Failed to write" in captured.err
        assert "Wrote 2 pages, 1 failed." in captured.out

    def test_unreadable_subdirectory_does_not_stop_batch(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "site"
        write_post(src, "a.md", "A", "2024-01-01")
        write_post(src / "locked", "b.md", "B", "2024-01-02")
        original_iterdir = Path.iterdir

        def iterdir(self: Path):
            if self.name == "locked":
                raise PermissionError(13, "Permission denied", str(self))
            return original_iterdir(self)

        monkeypatch.setattr(Path, "iterdir", iterdir)

        main([str(src)])

        assert (src / "a.html").is_file()
        assert not (src / "locked" / "b.html").exists()
        assert "Permission denied" in capsys.readouterr().err

    def test_mirrors_into_output_dir(self, tmp_path: Path) -> None:
        src = tmp_path / "site"
        write_post(src, "index.md", "Home", "2024-01-01")
        write_post(src / "blog", "one.md", "One", "2024-02-01")
        write_post(src / "blog", "two.md", "Two", "2024-02-02")
        (src / "blog" / "blog.css").write_text("h1 { color: red; }")
        out = tmp_path / "out"

        main([str(src), str(out)])

        assert (out / "index.html").exists()
        assert (out / "blog" / "one.html").exists()
        assert (out / "blog" / "blog.css").read_text() == "h1 { color: red; }"
        assert not (src / "index.html").exists()
        # Chaining stays inside a directory.
        home = (out / "index.html").read_text(encoding="utf-8")
        assert 'rel="next"' not in home
        assert 'href="two.html" rel="next"' in (out / "blog" / "one.html").read_text(encoding="utf-8")

    def test_no_recursive(self, tmp_path: Path) -> None:
        src = tmp_path / "site"
        write_post(src, "index.md", "Home", "2024-01-01")
        write_post(src / "blog", "one.md", "One", "2024-02-01")
        out = tmp_path / "out"

        main([str(src), str(out), "--no-recursive"])

        assert (out / "index.html").exists()
        assert not (out / "blog").exists()

    def test_no_copy_assets(self, tmp_path: Path) -> None:
        src = tmp_path / "site"
        write_post(src, "index.md", "Home", "2024-01-01")
        (src / "site.css").write_text("body {}")
        out = tmp_path / "out"

        main([str(src), str(out), "--no-copy-assets"])

        assert not (out / "site.css").exists()

    def test_output_inside_source_is_not_rescanned(self, tmp_path: Path) -> None:
        src = tmp_path / "site"
        write_post(src, "index.md", "Home", "2024-01-01")
        out = src / "dist"
        write_post(out, "stale.md", "Stale", "2023-01-01")

        main([str(src), str(out)])

        assert (out / "index.html").exists()
        assert not (out / "stale.html").exists()

    def test_clean_removes_old_output(self, tmp_path: Path) -> None:
        src = tmp_path / "site"
        write_post(src, "index.md", "Home", "2024-01-01")
        out = tmp_path / "out"
        out.mkdir()
        (out / "old.html").write_text("old")

        main([str(src), str(out), "--clean"])

        assert not (out / "old.html").exists()
        assert (out / "index.html").exists()

    def test_stylesheet_from_config(self, tmp_path: Path) -> None:
        (tmp_path / "site.toml").write_text('stylesheet = "/main.css"\n', encoding="utf-8")
        src = tmp_path / "posts"
        write_post(src, "a.md", "A", "2024-01-01")

        main([str(src)])

        page = (src / "a.html").read_text(encoding="utf-8")
        assert '<link rel="stylesheet" href="/main.css">' in page


class TestSingleFileMode:
    """Tests for rendering one post."""

    def test_writes_sibling_html(self, tmp_path: Path) -> None:
        post = tmp_path / "note.md"
        post.write_text("---\ntitle: Note\n---\nJust a note.\n", encoding="utf-8")

        main([str(post)])

        page = (tmp_path / "note.html").read_text(encoding="utf-8")
        assert "<title>Note</title>" in page
        assert '<p class="text-gray-400 mb-4">Just a note.</p>' in page

    def test_never_chained(self, tmp_path: Path) -> None:
        write_post(tmp_path, "a.md", "A", "2024-01-01")
        post = write_post(tmp_path, "b.md", "B", "2024-01-02")

        main([str(post)])

        page = (tmp_path / "b.html").read_text(encoding="utf-8")
        assert 'rel="prev"' not in page
        assert not (tmp_path / "a.html").exists()

    def test_explicit_output_dir(self, tmp_path: Path) -> None:
        post = write_post(tmp_path / "src", "a.md", "A", "2024-01-01")
        out = tmp_path / "out"

        main([str(post), str(out)])

        assert (out / "a.html").exists()

    def test_malformed_file_exits(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        post = tmp_path / "bad.md"
        post.write_text("# no front matter\n", encoding="utf-8")

        with pytest.raises(SystemExit) as excinfo:
            main([str(post)])
        assert excinfo.value.code == 1
        assert "Invalid post" in capsys.readouterr().err


class TestArguments:
    """Tests for argument validation."""

    def test_missing_source(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main([str(tmp_path / "nope")])
        assert excinfo.value.code == 1
        assert "does not exist" in capsys.readouterr().err

    def test_inaccessible_source_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "posts"
        write_post(src, "a.md", "A", "2024-01-01")
        monkeypatch.setattr("mdchain.cli.os.access", lambda path, mode: False)

        with pytest.raises(SystemExit) as excinfo:
            main([str(src)])
        assert excinfo.value.code == 1
        assert "not accessible" in capsys.readouterr().err
        assert not (src / "a.html").exists()

    def test_no_arguments(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 2
        assert "usage" in capsys.readouterr().err

    def test_too_many_arguments(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main([str(tmp_path), "out", "extra"])
        assert excinfo.value.code == 2
        assert "usage" in capsys.readouterr().err

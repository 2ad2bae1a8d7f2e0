"""Tests for URL -> content path mapping."""

from __future__ import annotations

from pathlib import Path

import pytest

from blockport.paths import find_collisions, resolve_output_path


class TestResolveOutputPath:
    def test_trailing_slash_maps_to_index(self):
        assert resolve_output_path("https://example.com/blog/").relative_path == "content/blog/index.md"

    def test_last_segment_becomes_file(self):
        assert resolve_output_path("https://example.com/blog/post-a").relative_path == "content/blog/post-a.md"

    def test_root_url_is_index(self):
        assert resolve_output_path("https://example.com/").relative_path == "content/index.md"

    def test_empty_path_is_index(self):
        assert resolve_output_path("https://example.com").relative_path == "content/index.md"

    def test_query_and_fragment_ignored(self):
        target = resolve_output_path("https://example.com/about/team/?ref=nav#top")
        assert target.relative_path == "content/about/team/index.md"

    def test_custom_root(self, tmp_path):
        target = resolve_output_path("https://example.com/a/b/", tmp_path / "out")
        assert target.md_path == tmp_path / "out" / "a" / "b" / "index.md"
        assert target.directory == tmp_path / "out" / "a" / "b"

    def test_directory_is_parent_of_file(self):
        target = resolve_output_path("https://example.com/x/y/z")
        assert target.md_path.parent == target.directory
        assert target.directory == Path("content") / "x" / "y"

    def test_case_preserved(self):
        assert resolve_output_path("https://example.com/Blog/Post").relative_path == "content/Blog/Post.md"

    @pytest.mark.parametrize("url", [
        "https://example.com/blog/",
        "https://example.com/blog/post-a",
        "https://example.com/blog/post-a/",
        "https://example.com/case-studies/acme/",
    ])
    def test_relative_path_is_posix(self, url):
        assert "\\" not in resolve_output_path(url).relative_path


class TestFindCollisions:
    def test_distinct_urls_do_not_collide(self):
        urls = [
            "https://example.com/blog/",
            "https://example.com/blog/post-a",
            "https://example.com/blog/post-b/",
        ]
        assert find_collisions(urls) == {}

    def test_same_path_from_two_urls(self):
        urls = ["https://example.com/about/", "https://example.com/about/index"]
        collisions = find_collisions(urls)
        assert collisions == {"content/about/index.md": urls}

    def test_unparseable_url_ignored(self):
        assert find_collisions(["http://[broken/x", "https://example.com/a/"]) == {}

    def test_repeated_url_is_not_a_collision(self):
        assert find_collisions(["https://example.com/a/", "https://example.com/a/"]) == {}

"""Tests for check file discovery."""

import textwrap

from pagecheck.scenarios import clear_registry, collect, get_requirement_registry


def write_check(path, body: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


CAROUSEL = """
    from pagecheck import requirement, scenario, tag

    requirement("CAR-1", "Carousel navigates", "Arrows move between slides", category="Navigation")

    @scenario("CAR-1", "Next arrow works", category="Navigation")
    async def check_next(ctx):
        pass

    @tag("slow")
    @scenario("CAR-1", "Previous arrow works", category="Navigation")
    async def check_prev(ctx):
        pass

    def helper():
        return 1
"""


def test_collects_scenarios_in_definition_order(tmp_path):
    write_check(tmp_path / "check_disc_carousel.py", CAROUSEL)

    scenarios = collect(tmp_path)

    assert [s.title for s in scenarios] == ["Next arrow works", "Previous arrow works"]
    assert scenarios[1].tags == {"slow"}
    assert [s.title for s in get_requirement_registry()["CAR-1"].scenarios] == [
        "Next arrow works",
        "Previous arrow works",
    ]


def test_walks_directories_in_sorted_order(tmp_path):
    write_check(
        tmp_path / "b" / "check_disc_video.py",
        """
        from pagecheck import scenario

        @scenario("VID-1", "Video autoplays")
        def check_video(ctx):
            pass
        """,
    )
    write_check(
        tmp_path / "a" / "check_disc_form.py",
        """
        from pagecheck import scenario

        @scenario("FORM-1", "Email required")
        def check_email(ctx):
            pass
        """,
    )

    assert [s.requirement_id for s in collect(str(tmp_path))] == ["FORM-1", "VID-1"]


def test_ignores_non_check_files_and_hidden_dirs(tmp_path):
    body = """
        from pagecheck import scenario

        @scenario("X-1", "Should not be found")
        def check_hidden(ctx):
            pass
    """
    write_check(tmp_path / "helpers.py", body)
    write_check(tmp_path / ".cache" / "check_disc_hidden.py", body)
    write_check(tmp_path / "node_modules" / "pkg" / "check_disc_vendor.py", body)

    assert collect(tmp_path) == []


def test_single_file_path(tmp_path):
    path = write_check(tmp_path / "check_disc_single.py", CAROUSEL)
    assert len(collect(path)) == 2


def test_recollects_after_registry_cleared(tmp_path):
    path = write_check(tmp_path / "check_disc_again.py", CAROUSEL)
    first = collect(path)
    clear_registry()

    second = collect(path)

    assert [s.id for s in second] == [s.id for s in first]
    req = get_requirement_registry()["CAR-1"]
    assert len(req.scenarios) == 2
    assert req.title == "Carousel navigates"
    assert req.description == "Arrows move between slides"


def test_missing_path_yields_nothing(tmp_path, caplog):
    assert collect(tmp_path / "nope") == []
    assert "does not exist" in caplog.text


def test_same_file_name_in_two_directories(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for site in ("site_a", "site_b"):
        write_check(
            tmp_path / site / "check_home.py",
            f"""
            from pagecheck import scenario

            @scenario("HOME-1", "Hero visible on {site}")
            def check_hero(ctx):
                pass
            """,
        )

    scenarios = collect(tmp_path)

    assert [s.id for s in scenarios] == [
        "site_a.check_home::check_hero",
        "site_b.check_home::check_hero",
    ]
    assert [s.title for s in scenarios] == ["Hero visible on site_a", "Hero visible on site_b"]


def test_module_names_follow_working_directory(tmp_path, monkeypatch):
    write_check(tmp_path / "checks" / "site-a" / "check_disc_cwd.py", CAROUSEL)
    monkeypatch.chdir(tmp_path)

    from_dir = collect("checks")
    from_file = collect("checks/site-a/check_disc_cwd.py")

    assert from_dir[0].id == "checks.site_a.check_disc_cwd::check_next"
    assert [s.id for s in from_file] == [s.id for s in from_dir]


def test_reused_module_keeps_scenarios_registered(tmp_path):
    path = write_check(tmp_path / "check_disc_reuse.py", CAROUSEL)

    first = collect(path)
    second = collect(path)

    assert [s.fn for s in second] == [s.fn for s in first]

import json
from pathlib import Path

import pytest

import main
from core import run
from tmdb.client import NetworkError

TERMINATOR_RESULT = {
    "title": "Terminator",
    "release_date": "1984-10-26",
    "popularity": 50,
    "overview": "A cyborg assassin.",
    "poster_path": "/terminator.jpg",
}


def _fake_search(results_by_query: dict, calls: list | None = None):
    def fake(session, api_key, query, language, timeout=None):
        if calls is not None:
            calls.append({"query": query, "language": language, "api_key": api_key})
        return {"results": results_by_query.get(query, [])}

    return fake


def _scripted_input(monkeypatch, answers: list[str]) -> list[str]:
    prompts: list[str] = []

    def fake_input(prompt: str) -> str:
        prompts.append(prompt)
        return answers.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)
    return prompts


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TMDB_API_KEY", "x")
    monkeypatch.delenv("TMDB_LANG", raising=False)


def _movies(tmp_path: Path, *names: str) -> Path:
    root = tmp_path / "movies"
    root.mkdir()
    for name in names:
        (root / name).mkdir()
    return root


def test_scenario_a_renames_directory_and_file(tmp_path: Path, monkeypatch, capsys) -> None:
    root = _movies(tmp_path, "Terminator")
    (root / "Terminator" / "Terminator.mp4").write_text("data", encoding="utf-8")
    calls: list = []
    monkeypatch.setattr(run, "search_movies", _fake_search({"Terminator": [TERMINATOR_RESULT]}, calls))
    _scripted_input(monkeypatch, ["1"])

    exit_code = main.main(["--DIR", str(root)])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert (root / "Terminator (1984)" / "Terminator (1984).mp4").is_file()
    assert not (root / "Terminator").exists()
    assert calls == [{"query": "Terminator", "language": "en-US", "api_key": "x"}]
    assert "1. Terminator (1984)" in out
    assert "Renaming process completed." in out


def test_scenario_b_year_tagged_directory_is_never_searched(tmp_path: Path, monkeypatch, capsys) -> None:
    root = _movies(tmp_path, "The Foo (1999)")

    def no_search(*_args, **_kwargs):
        raise AssertionError("search must not be called")

    monkeypatch.setattr(run, "search_movies", no_search)
    report_file = tmp_path / "nf.log"

    exit_code = main.main(["--DIR", str(root), "--REPORT_FILE", str(report_file)])

    assert exit_code == 0
    assert (root / "The Foo (1999)").is_dir()
    assert not report_file.exists()
    assert "already contains year" in capsys.readouterr().out


def test_scenario_c_no_results_is_reported(tmp_path: Path, monkeypatch) -> None:
    root = _movies(tmp_path, "Unknown Film XYZ")
    monkeypatch.setattr(run, "search_movies", _fake_search({}))

    exit_code = main.main(["--DIR", str(root)])

    assert exit_code == 0
    assert (root / "Unknown Film XYZ").is_dir()
    assert (tmp_path / "not_found.log").read_text(encoding="utf-8") == "Unknown Film XYZ\n"


def test_scenario_d_search_limit_stops_the_run(tmp_path: Path, monkeypatch, capsys) -> None:
    root = _movies(tmp_path, "Alpha", "Beta", "Already (2001)")
    calls: list = []
    monkeypatch.setattr(run, "search_movies", _fake_search({}, calls))

    exit_code = main.main(["--DIR", str(root), "--LIMIT_SEARCH", "1"])

    assert exit_code == 0
    assert [c["query"] for c in calls] == ["Alpha"]
    assert "Search limit of 1 reached; stopping." in capsys.readouterr().out
    assert (tmp_path / "not_found.log").read_text(encoding="utf-8") == "Alpha\n"


def test_filtered_directories_do_not_count_toward_limit(tmp_path: Path, monkeypatch) -> None:
    root = _movies(tmp_path, "A Movie (1990)", "B Movie (1991)", "Cats")
    calls: list = []
    monkeypatch.setattr(run, "search_movies", _fake_search({}, calls))

    assert main.main(["--DIR", str(root), "--LIMIT_SEARCH", "1"]) == 0
    assert [c["query"] for c in calls] == ["Cats"]


def test_scenario_e_user_skip_changes_nothing(tmp_path: Path, monkeypatch) -> None:
    root = _movies(tmp_path, "Terminator")
    (root / "Terminator" / "Terminator.mp4").write_text("data", encoding="utf-8")
    monkeypatch.setattr(run, "search_movies", _fake_search({"Terminator": [TERMINATOR_RESULT]}))
    _scripted_input(monkeypatch, ["0"])
    preview_file = tmp_path / "preview.html"

    exit_code = main.main(["--DIR", str(root), "--PREVIEW", "--PREVIEW_FILE", str(preview_file)])

    assert exit_code == 0
    assert (root / "Terminator" / "Terminator.mp4").is_file()
    assert not (tmp_path / "not_found.log").exists()
    assert "<tr><td>" not in preview_file.read_text(encoding="utf-8")


def test_invalid_selection_skips(tmp_path: Path, monkeypatch, capsys) -> None:
    root = _movies(tmp_path, "Terminator")
    monkeypatch.setattr(run, "search_movies", _fake_search({"Terminator": [TERMINATOR_RESULT]}))
    _scripted_input(monkeypatch, ["7"])

    assert main.main(["--DIR", str(root)]) == 0
    assert (root / "Terminator").is_dir()
    assert "[WARN] Invalid selection '7'." in capsys.readouterr().out


def test_dry_run_with_preview(tmp_path: Path, monkeypatch, capsys) -> None:
    root = _movies(tmp_path, "Terminator")
    (root / "Terminator" / "Terminator.mp4").write_text("data", encoding="utf-8")
    monkeypatch.setattr(run, "search_movies", _fake_search({"Terminator": [TERMINATOR_RESULT]}))
    _scripted_input(monkeypatch, ["1"])

    exit_code = main.main(["--DIR", str(root), "--DRY_RUN", "--PREVIEW"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert (root / "Terminator" / "Terminator.mp4").is_file()
    assert "[DRY RUN] Would rename directory 'Terminator' -> 'Terminator (1984)'" in out
    html = (tmp_path / "preview.html").read_text(encoding="utf-8")
    assert "<td>Terminator (1984)</td>" in html
    assert "https://image.tmdb.org/t/p/w500/terminator.jpg" in html


def test_shortlist_is_top_five_by_popularity(tmp_path: Path, monkeypatch, capsys) -> None:
    root = _movies(tmp_path, "Alien")
    results = [
        {"title": f"Alien {i}", "release_date": f"19{80 + i}-01-01", "popularity": i, "overview": "", "poster_path": None}
        for i in range(1, 8)
    ]
    monkeypatch.setattr(run, "search_movies", _fake_search({"Alien": results}))
    prompts = _scripted_input(monkeypatch, ["2"])

    assert main.main(["--DIR", str(root)]) == 0
    out = capsys.readouterr().out
    assert "1. Alien 7 (1987)" in out
    assert "5. Alien 3 (1983)" in out
    assert "Alien 2 (1982)" not in out
    assert prompts == ["Select the correct movie (1-5) or 0 to skip: "]
    assert (root / "Alien 6 (1986)").is_dir()


def test_force_mode_selects_without_prompt(tmp_path: Path, monkeypatch) -> None:
    root = _movies(tmp_path, "Terminator")
    monkeypatch.setattr(run, "search_movies", _fake_search({"Terminator": [TERMINATOR_RESULT]}))

    def no_input(_prompt: str) -> str:
        raise AssertionError("force mode must not prompt")

    monkeypatch.setattr("builtins.input", no_input)

    assert main.main(["--DIR", str(root), "--FORCE"]) == 0
    assert (root / "Terminator (1984)").is_dir()


def test_age_filter_skips_young_directories(tmp_path: Path, monkeypatch) -> None:
    root = _movies(tmp_path, "Fresh")
    monkeypatch.setattr(run, "search_movies", _fake_search({}))

    assert main.main(["--DIR", str(root), "--MIN_AGE_DAYS", "1"]) == 0
    assert not (tmp_path / "not_found.log").exists()


def test_language_from_environment(tmp_path: Path, monkeypatch) -> None:
    root = _movies(tmp_path, "Amelie")
    calls: list = []
    monkeypatch.setattr(run, "search_movies", _fake_search({}, calls))
    monkeypatch.setenv("TMDB_LANG", "fr-FR")

    assert main.main(["--DIR", str(root)]) == 0
    assert calls[0]["language"] == "fr-FR"

    calls.clear()
    (tmp_path / "not_found.log").unlink()
    assert main.main(["--DIR", str(root), "--LANG", "de-DE"]) == 0
    assert calls[0]["language"] == "de-DE"


def test_api_key_from_dotenv_file(tmp_path: Path, monkeypatch) -> None:
    root = _movies(tmp_path, "Amelie")
    monkeypatch.delenv("TMDB_API_KEY", raising=False)
    (tmp_path / ".env").write_text("# comment\nTMDB_API_KEY=from-dotenv\n", encoding="utf-8")
    calls: list = []
    monkeypatch.setattr(run, "search_movies", _fake_search({}, calls))

    assert main.main(["--DIR", str(root)]) == 0
    assert calls[0]["api_key"] == "from-dotenv"


def test_network_error_is_fatal_but_report_is_flushed(tmp_path: Path, monkeypatch, capsys) -> None:
    root = _movies(tmp_path, "Alpha", "Beta", "Gamma")

    def flaky(session, api_key, query, language, timeout=None):
        if query == "Beta":
            raise NetworkError("TMDb request to /search/movie failed: timed out")
        return {"results": []}

    monkeypatch.setattr(run, "search_movies", flaky)

    exit_code = main.main(["--DIR", str(root)])

    assert exit_code == 1
    assert "[ERROR] TMDb request to /search/movie failed: timed out" in capsys.readouterr().err
    assert (tmp_path / "not_found.log").read_text(encoding="utf-8") == "Alpha\n"


def test_network_error_can_be_skipped_per_directory(tmp_path: Path, monkeypatch) -> None:
    root = _movies(tmp_path, "Alpha", "Beta")
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text(json.dumps({"tmdb": {"fail_fast": False}}), encoding="utf-8")

    def flaky(session, api_key, query, language, timeout=None):
        if query == "Alpha":
            raise NetworkError("boom")
        return {"results": []}

    monkeypatch.setattr(run, "search_movies", flaky)

    assert main.main(["--DIR", str(root), "--CONFIG", str(cfg_path)]) == 0
    assert (tmp_path / "not_found.log").read_text(encoding="utf-8") == "Alpha\nBeta\n"


def test_existing_destination_directory_is_fatal(tmp_path: Path, monkeypatch, capsys) -> None:
    root = _movies(tmp_path, "Terminator", "Terminator (1984)")
    monkeypatch.setattr(run, "search_movies", _fake_search({"Terminator": [TERMINATOR_RESULT]}))
    _scripted_input(monkeypatch, ["1"])

    assert main.main(["--DIR", str(root)]) == 1
    assert "already exists" in capsys.readouterr().err
    assert (root / "Terminator").is_dir()


def test_existing_destination_keeps_video_file_in_place(tmp_path: Path, monkeypatch) -> None:
    root = _movies(tmp_path, "Terminator", "Terminator (1984)")
    (root / "Terminator" / "Terminator.mp4").write_text("data", encoding="utf-8")
    monkeypatch.setattr(run, "search_movies", _fake_search({"Terminator": [TERMINATOR_RESULT]}))
    _scripted_input(monkeypatch, ["1"])

    assert main.main(["--DIR", str(root)]) == 1
    assert (root / "Terminator" / "Terminator.mp4").is_file()


def test_unwritable_report_file_exits_with_one(tmp_path: Path, monkeypatch, capsys) -> None:
    root = _movies(tmp_path, "Unknown Film XYZ")
    report_dir = tmp_path / "reportdir"
    report_dir.mkdir()
    monkeypatch.setattr(run, "search_movies", _fake_search({}))

    assert main.main(["--DIR", str(root), "--REPORT_FILE", str(report_dir)]) == 1
    assert "[ERROR] Cannot write report:" in capsys.readouterr().err
    assert report_dir.is_dir()


def test_report_error_does_not_hide_network_error(tmp_path: Path, monkeypatch, capsys) -> None:
    root = _movies(tmp_path, "Alpha", "Beta")
    report_dir = tmp_path / "reportdir"
    report_dir.mkdir()

    def flaky(session, api_key, query, language, timeout=None):
        if query == "Beta":
            raise NetworkError("TMDb request to /search/movie failed: timed out")
        return {"results": []}

    monkeypatch.setattr(run, "search_movies", flaky)

    assert main.main(["--DIR", str(root), "--REPORT_FILE", str(report_dir)]) == 1
    err = capsys.readouterr().err
    assert "[ERROR] TMDb request to /search/movie failed: timed out" in err
    assert "[ERROR] Cannot write report:" in err


def test_untitled_result_is_skipped(tmp_path: Path, monkeypatch, capsys) -> None:
    root = _movies(tmp_path, "Mystery")
    untitled = dict(TERMINATOR_RESULT, title="   ")
    monkeypatch.setattr(run, "search_movies", _fake_search({"Mystery": [untitled]}))
    _scripted_input(monkeypatch, ["1"])

    assert main.main(["--DIR", str(root)]) == 0
    assert sorted(p.name for p in root.iterdir()) == ["Mystery"]
    assert "has no title" in capsys.readouterr().out


def test_missing_dir_argument(capsys) -> None:
    assert main.main([]) == 1
    assert "Missing required argument: --DIR" in capsys.readouterr().err


def test_nonexistent_dir(tmp_path: Path, capsys) -> None:
    assert main.main(["--DIR", str(tmp_path / "nope")]) == 1
    assert "does not exist" in capsys.readouterr().err


def test_missing_api_key(tmp_path: Path, monkeypatch, capsys) -> None:
    root = _movies(tmp_path, "Terminator")
    monkeypatch.delenv("TMDB_API_KEY", raising=False)

    assert main.main(["--DIR", str(root)]) == 1
    assert "TMDb API key not set" in capsys.readouterr().err


def test_missing_config_file(tmp_path: Path, capsys) -> None:
    root = _movies(tmp_path)
    assert main.main(["--DIR", str(root), "--CONFIG", str(tmp_path / "missing.json")]) == 1
    assert "Config path not found" in capsys.readouterr().err


@pytest.mark.parametrize(
    "argv",
    [
        ["--DIR", ".", "--BOGUS"],
        ["--DIR", ".", "--LIMIT_SEARCH", "abc"],
        ["--DIR", ".", "--LIMIT_SEARCH", "-2"],
        ["--DIR", ".", "--DRY_RUN", "maybe"],
        ["--DIR", ".", "--MIN_AGE"],
    ],
)
def test_bad_arguments_exit_with_one(argv: list[str], capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main.main(argv)
    assert excinfo.value.code == 1
    assert "error:" in capsys.readouterr().err


def test_help_exits_zero(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main.main(["--help"])
    assert excinfo.value.code == 0
    assert "--LIMIT_SEARCH" in capsys.readouterr().out

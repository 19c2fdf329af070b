from __future__ import annotations

import pytest

from notemerge import run
from notemerge.config import Settings
from notemerge.errors import DocumentDecodeError, InvalidNoteError, PromptError
from notemerge.merge import Reject, Replace
from notemerge.store import load_collection, load_history


def test_run_merges_sources_in_order(notes_dir, tmp_path, scripted):
    collection_path = tmp_path / "collection.json"
    history_path = tmp_path / "history.json"
    prompter = scripted([Reject()])

    report = run(collection_path, history_path, [notes_dir["lesson1"], notes_dir["lesson2"]], prompter)

    assert prompter.asked == ["적: gang"]
    assert (report.sources, report.entries, report.inserted, report.skipped, report.rejected) == (2, 5, 3, 1, 1)
    collection = load_collection(collection_path)
    school = collection.meanings("학교")
    assert [(m.text, m.symbol) for m in school] == [("skole", None)]
    assert collection.title(school[0].source) == "Lesson 1"
    assert collection.title(collection.meanings("그때")[0].source) == "Lesson 2"
    assert load_history(history_path).has_been_handled("적", "gang")


def test_second_run_does_not_ask_again(notes_dir, tmp_path, scripted):
    collection_path = tmp_path / "collection.json"
    history_path = tmp_path / "history.json"
    sources = [notes_dir["lesson1"], notes_dir["lesson2"]]
    run(collection_path, history_path, sources, scripted([Reject()]))

    prompter = scripted([])
    report = run(collection_path, history_path, sources, prompter)

    assert prompter.asked == []
    assert (report.inserted, report.skipped) == (0, 5)


def test_invalid_index_is_asked_again(notes_dir, tmp_path, scripted):
    prompter = scripted([Replace(4), Replace(0)])
    report = run(
        tmp_path / "collection.json",
        tmp_path / "history.json",
        [notes_dir["lesson1"], notes_dir["lesson2"]],
        prompter,
    )
    assert len(prompter.warnings) == 1
    assert report.replaced == 1
    collection = load_collection(tmp_path / "collection.json")
    assert [m.text for m in collection.meanings("적")] == ["gang"]
    assert collection.title(collection.meanings("적")[0].source) == "Lesson 2"


def test_repeated_titles_share_one_id(tmp_path, scripted):
    first = tmp_path / "a.txt"
    second = tmp_path / "b.txt"
    first.write_text("# title: Shared\n적 tid\n", encoding="utf-8")
    second.write_text("# title: Shared\n학교 skole\n", encoding="utf-8")
    run(tmp_path / "collection.json", tmp_path / "history.json", [first, second], scripted([]))
    collection = load_collection(tmp_path / "collection.json")
    assert len(collection.titles) == 1
    assert collection.meanings("적")[0].source == collection.meanings("학교")[0].source


def test_prompt_failure_saves_decisions_made_so_far(notes_dir, tmp_path, scripted):
    collection_path = tmp_path / "collection.json"
    history_path = tmp_path / "history.json"
    prompter = scripted([PromptError("stdin closed")])

    with pytest.raises(PromptError):
        run(collection_path, history_path, [notes_dir["lesson1"], notes_dir["lesson2"]], prompter)

    collection = load_collection(collection_path)
    assert "학교" in collection
    assert "그때" not in collection
    history = load_history(history_path)
    assert history.has_been_handled("적", "tidspunkt (situation, oplevelse)")
    assert not history.has_been_handled("적", "gang")


def test_broken_source_keeps_earlier_sources(notes_dir, tmp_path, scripted):
    collection_path = tmp_path / "collection.json"
    with pytest.raises(InvalidNoteError) as excinfo:
        run(
            collection_path,
            tmp_path / "history.json",
            [notes_dir["lesson1"], notes_dir["broken"], notes_dir["lesson2"]],
            scripted([]),
        )
    assert excinfo.value.lineno == 2
    collection = load_collection(collection_path)
    assert set(collection) == {"적", "학교"}


def test_unreadable_collection_is_not_overwritten(tmp_path, notes_dir, scripted):
    collection_path = tmp_path / "collection.json"
    collection_path.write_text("{broken", encoding="utf-8")
    with pytest.raises(DocumentDecodeError):
        run(collection_path, tmp_path / "history.json", [notes_dir["lesson1"]], scripted([]))
    assert collection_path.read_text(encoding="utf-8") == "{broken"
    assert not (tmp_path / "history.json").exists()


def test_backups_are_written_when_configured(notes_dir, tmp_path, scripted):
    settings = Settings(backup_dir=str(tmp_path / "backups"))
    args = (tmp_path / "collection.json", tmp_path / "history.json", [notes_dir["lesson1"]])
    run(*args, scripted([]), settings)
    run(*args, scripted([]), settings)
    assert list((tmp_path / "backups").rglob("collection.json"))
    assert list((tmp_path / "backups").rglob("history.json"))

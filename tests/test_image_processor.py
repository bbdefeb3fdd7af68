import subprocess
import unicodedata

import pytest

from annotator.config import AnnotatorConfig
from annotator.image_processor import annotate_image, build_convert_command
from annotator.tasks import AnnotationTask
from annotator.text_normalizer import normalize_caption

DECOMPOSED = unicodedata.normalize("NFD", "Nîmes, 15 août 2023")


@pytest.fixture
def task():
	return AnnotationTask("/pics", "/pics/ready", "2023-08-15_10-00-00-pola.jpg", "Nîmes", DECOMPOSED)


@pytest.fixture
def calls(monkeypatch):
	recorded = []

	def fake_run(command, **kwargs):
		recorded.append(command)
		return subprocess.CompletedProcess(command, 0, "", "")

	monkeypatch.setattr("annotator.image_processor.subprocess.run", fake_run)
	return recorded


def test_command_layout():
	assert build_convert_command("in.jpg", "out.jpg", "Arial", 100, "+0+111", "15 mars 2023") == [
		"convert", "in.jpg",
		"-font", "Arial",
		"-pointsize", "100",
		"-fill", "black",
		"-gravity", "south",
		"-annotate", "+0+111", "15 mars 2023",
		"out.jpg",
	]


def test_normalize_composes():
	assert normalize_caption("e\u0301") == "\u00e9"


def test_normalize_is_idempotent():
	for text in ["Paris, 1er janvier 2023", DECOMPOSED, "A\u030angstro\u0308m", "", "e\u0301\u0301"]:
		once = normalize_caption(text)
		assert normalize_caption(once) == once


def test_annotate_runs_convert_with_composed_caption(task, calls):
	assert annotate_image(task, AnnotatorConfig()) is True

	command = calls[0]
	assert command[0] == "convert"
	assert command[1] == "/pics/2023-08-15_10-00-00-pola.jpg"
	assert command[-1] == "/pics/ready/2023-08-15_10-00-00-pola.jpg"
	assert command[command.index("-annotate") + 1] == "+0+111"
	assert command[command.index("-annotate") + 2] == "Nîmes, 15 août 2023"
	assert unicodedata.is_normalized("NFC", command[-2])


def test_annotate_uses_config(task, calls):
	config = AnnotatorConfig(font="Helvetica", text_size=40, bottom_margin=0, convert_binary="magick")

	annotate_image(task, config)

	command = calls[0]
	assert command[0] == "magick"
	assert command[command.index("-font") + 1] == "Helvetica"
	assert command[command.index("-pointsize") + 1] == "40"
	assert command[command.index("-annotate") + 1] == "+0+161"


def test_dry_run_does_not_call_convert(task, calls):
	assert annotate_image(task, AnnotatorConfig(dry_run=True)) is True
	assert calls == []


def test_failed_convert_is_reported(task, monkeypatch, caplog):
	def fake_run(command, **kwargs):
		return subprocess.CompletedProcess(command, 1, "", "convert: unable to open image")

	monkeypatch.setattr("annotator.image_processor.subprocess.run", fake_run)

	assert annotate_image(task, AnnotatorConfig()) is False
	assert "unable to open image" in caplog.text


def test_missing_binary_is_reported(task, monkeypatch, caplog):
	def fake_run(command, **kwargs):
		raise FileNotFoundError(2, "No such file or directory", command[0])

	monkeypatch.setattr("annotator.image_processor.subprocess.run", fake_run)

	assert annotate_image(task, AnnotatorConfig()) is False
	assert "No such file" in caplog.text

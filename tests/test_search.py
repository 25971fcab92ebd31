"""Tests for the local search: worker loop, generator and export."""

import os
import threading

import pytest

from evanity.core import address_from_private_key
from evanity.export import prepare_export, save_key_file, save_report
from evanity.generator import VanityGenerator
from evanity.matcher import rarity_of
from evanity.problems import Problem
from evanity.worker import search_worker


class FakeCounter:
    def __init__(self):
        self.value = 0
        self._lock = threading.Lock()

    def get_lock(self):
        return self._lock


class ListQueue(list):
    def put(self, item):
        self.append(item)


def test_worker_reports_first_matching_problem():
    # Letters-heavy 0 matches every address, so the first key is a hit.
    problems = [Problem.numbers_heavy(), Problem.letters_heavy(0)]
    queue, stop, counter = ListQueue(), threading.Event(), FakeCounter()

    search_worker(problems, queue, stop, counter, batch_size=10)

    assert stop.is_set()
    assert counter.value == 1
    (prv, address, index), = queue
    assert address_from_private_key(prv) == address
    assert index == 1


def test_worker_honours_stop_event():
    queue, stop, counter = ListQueue(), threading.Event(), FakeCounter()
    stop.set()
    search_worker([Problem.user_prefix("0x" + "0" * 40)], queue, stop, counter)
    assert queue == []
    assert counter.value == 0


def test_generator_validates_problems():
    with pytest.raises(ValueError):
        VanityGenerator([Problem.leading_any(3)])
    with pytest.raises(ValueError):
        VanityGenerator([], validate=False)


def test_generator_difficulty():
    gen = VanityGenerator([Problem.user_prefix("0xcafe00")], num_workers=2)
    assert gen.num_workers == 2
    assert gen.get_difficulty() == 16 ** 6
    assert not gen.is_running


def test_export_files(tmp_path):
    prv = (1).to_bytes(32, "big")
    address = address_from_private_key(prv)
    problem = Problem.letters_heavy(0)
    export = prepare_export(prv, address, problem, rarity_of(address, problem))

    assert export.private_key_hex == "0x" + "00" * 31 + "01"
    assert export.checksum_address.lower() == address

    key_path = save_key_file(export, str(tmp_path / "out" / "found.key"))
    report_path = save_report(export, str(tmp_path / "out" / "found.txt"))

    with open(key_path) as f:
        assert f.read().strip() == export.private_key_hex
    with open(report_path) as f:
        report = f.read()
    assert export.checksum_address in report
    assert "letters-heavy=0" in report
    if os.name == "posix":
        assert os.stat(key_path).st_mode & 0o777 == 0o600

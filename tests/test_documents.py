import json

from parsebench.benchmark.documents import build_samples, generate_samples, load_documents


class TestLoadDocuments:
    def test_loads_in_input_order(self, sample_files):
        docs, skipped = load_documents([sample_files / "sample-big-array.json", sample_files / "sample.json"])
        assert [d.name for d in docs] == ["sample-big-array.json", "sample.json"]
        assert skipped == []
        assert docs[1].text == '{"users": [{"id": 1}], "total": 1}'

    def test_unreadable_files_are_skipped(self, tmp_path):
        bad = tmp_path / "latin1.json"
        bad.write_bytes(b'{"name": "caf\xe9"}')

        docs, skipped = load_documents([tmp_path / "missing.json", bad])

        assert docs == []
        assert skipped == ["missing.json", "latin1.json"]


class TestGenerateSamples:
    def test_same_seed_same_documents(self):
        assert build_samples(seed=3, records=10) == build_samples(seed=3, records=10)
        assert build_samples(seed=3, records=10) != build_samples(seed=4, records=10)

    def test_writes_reference_files(self, tmp_path):
        paths = generate_samples(tmp_path / "out", seed=1, records=20)

        assert [p.name for p in paths] == ["sample.json", "sample-big-array.json", "sample-big-object.json"]
        assert len(json.loads(paths[1].read_text(encoding="utf-8"))) == 20
        assert len(json.loads(paths[2].read_text(encoding="utf-8"))) == 20
        assert json.loads(paths[0].read_text(encoding="utf-8"))["total"] == 3

"""Tests for score fingerprints and manifests."""

import hashlib
import json

from assistdesk.priorart.scoring import score_all_patents, score_patent
from assistdesk.reproducibility import (
    canonical_json,
    fingerprint,
    verify_manifest,
    write_manifest,
)


class TestFingerprint:
    """Tests for canonical hashing."""

    def test_key_order_irrelevant(self):
        """Test that dict key order does not change the hash."""
        assert fingerprint({"a": 1, "b": [1, 2]}) == fingerprint({"b": [1, 2], "a": 1})

    def test_matches_sha256_of_canonical_json(self):
        """Test the digest is SHA256 over compact sorted JSON."""
        expected = hashlib.sha256(b'{"a":1,"b":"x"}').hexdigest()
        assert canonical_json({"b": "x", "a": 1}) == '{"a":1,"b":"x"}'
        assert fingerprint({"b": "x", "a": 1}) == expected

    def test_scores_are_reproducible(self):
        """Test that two scoring runs hash identically."""
        assert fingerprint(score_all_patents()) == fingerprint(score_all_patents())

    def test_scores_change_hash(self):
        """Test that a different score table hashes differently."""
        full = score_all_patents()
        partial = {"550": full["550"]}
        assert fingerprint(full) != fingerprint(partial)

    def test_patent_score_serialized_via_to_dict(self):
        score = score_patent("550", {"Claim 13": ["docking_system"]})
        assert fingerprint(score) == fingerprint(score.to_dict())


class TestManifest:
    """Tests for manifest writing and verification."""

    def test_write_manifest(self, tmp_path):
        scores = score_all_patents()
        path = tmp_path / "out" / "scores.json"

        manifest = write_manifest(path, scores)

        assert path.exists()
        data = json.loads(path.read_text())
        assert data["sha256"] == manifest["sha256"] == fingerprint(scores)
        assert data["patent_count"] == 18
        assert data["scores"]["550"]["confidence"] == 98
        assert "generated_at" in data

    def test_verify_roundtrip(self, tmp_path):
        scores = score_all_patents()
        path = tmp_path / "scores.json"
        write_manifest(path, scores)

        assert verify_manifest(path, scores)

    def test_verify_detects_change(self, tmp_path):
        scores = score_all_patents()
        path = tmp_path / "scores.json"
        write_manifest(path, scores)

        assert not verify_manifest(path, {"550": scores["550"]})

    def test_verify_missing_manifest(self, tmp_path):
        assert not verify_manifest(tmp_path / "missing.json", score_all_patents())

    def test_verify_corrupt_manifest(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert not verify_manifest(path, score_all_patents())

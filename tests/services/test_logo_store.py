import json

import pytest

from ledgerglow.errors import LogoStoreError
from ledgerglow.services.logo_store import LogoStore


class TestLogoStoreLoad:
    @pytest.mark.asyncio
    async def test_missing_document_is_empty(self, tmp_path):
        store = LogoStore(tmp_path / "logos.json")
        assert await store.load() == {}

    @pytest.mark.asyncio
    async def test_corrupt_document_is_empty(self, tmp_path):
        path = tmp_path / "logos.json"
        path.write_text("{not json", encoding="utf-8")
        assert await LogoStore(path).load() == {}

    @pytest.mark.asyncio
    async def test_non_object_document_is_empty(self, tmp_path):
        path = tmp_path / "logos.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert await LogoStore(path).load() == {}

    @pytest.mark.asyncio
    async def test_reads_existing_document(self, tmp_path):
        path = tmp_path / "logos.json"
        path.write_text(json.dumps({"abc123": "data:image/webp;base64,AAAA"}), encoding="utf-8")
        store = LogoStore(path)
        assert await store.load() == {"abc123": "data:image/webp;base64,AAAA"}
        assert await store.get("abc123") == "data:image/webp;base64,AAAA"
        assert await store.get("missing") is None


class TestLogoStoreWrites:
    @pytest.mark.asyncio
    async def test_save_replaces_document_without_leftovers(self, tmp_path):
        path = tmp_path / "nested" / "logos.json"
        store = LogoStore(path)
        await store.save({"a": "data:1"})
        await store.save({"a": "data:1", "b": "data:2"})

        assert json.loads(path.read_text(encoding="utf-8")) == {"a": "data:1", "b": "data:2"}
        assert not (path.parent / "logos.json.tmp").exists()

    @pytest.mark.asyncio
    async def test_save_failure_raises(self, tmp_path):
        # The target is a directory, so the rename fails
        path = tmp_path / "logos.json"
        path.mkdir()
        with pytest.raises(LogoStoreError):
            await LogoStore(path).save({"a": "data:1"})

    @pytest.mark.asyncio
    async def test_add_persists_new_entries(self, tmp_path):
        path = tmp_path / "logos.json"
        store = LogoStore(path)
        assert await store.add("abc", "data:image/webp;base64,AA") is True

        assert json.loads(path.read_text(encoding="utf-8")) == {"abc": "data:image/webp;base64,AA"}

    @pytest.mark.asyncio
    async def test_existing_entries_are_never_overwritten(self, logo_store):
        await logo_store.add("abc", "data:first")
        assert await logo_store.add("abc", "data:second") is False
        assert await logo_store.get("abc") == "data:first"

    @pytest.mark.asyncio
    async def test_key_set_only_grows(self, logo_store):
        sizes = []
        for fingerprint in ["a", "b", "a", "c", "b"]:
            await logo_store.add(fingerprint, f"data:{fingerprint}")
            sizes.append(await logo_store.size())
        assert sizes == sorted(sizes)
        assert sizes[-1] == 3

    @pytest.mark.asyncio
    async def test_failed_persist_is_absorbed_and_flushed_later(self, tmp_path, monkeypatch):
        store = LogoStore(tmp_path / "logos.json")

        def broken_write(logos):
            raise LogoStoreError("disk full")

        monkeypatch.setattr(store, "_write", broken_write)
        assert await store.add("abc", "data:abc") is True
        # Still served from memory while the disk is broken
        assert await store.get("abc") == "data:abc"

        monkeypatch.undo()
        await store.flush()
        assert json.loads((tmp_path / "logos.json").read_text(encoding="utf-8")) == {"abc": "data:abc"}

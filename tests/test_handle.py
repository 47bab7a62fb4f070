"""Tests for Handle: lifecycle, key/value operations and transactions."""

import pytest

from unqlitekv import Config, Handle, MemoryEngine, OpenMode, ResultCode


class TestLifecycle:

    def test_open_close(self, engine, memory_config):
        db = Handle(engine, memory_config)
        assert not db.is_open
        assert db.open(":mem:")
        assert db.is_open
        assert db.last_result_code is ResultCode.OK
        assert db.close()
        assert not db.is_open

    def test_second_close_fails(self, db):
        assert db.close()
        assert not db.close()
        assert db.last_result_code is ResultCode.CORRUPT_POINTER

    def test_operations_before_open(self, engine, memory_config):
        db = Handle(engine, memory_config)
        assert not db.store(b"k", b"v")
        assert db.last_result_code is ResultCode.CORRUPT_POINTER
        assert db.fetch(b"k") == b""
        assert db.last_result_code is ResultCode.CORRUPT_POINTER

    def test_reopen_closes_previous_connection(self, engine, memory_config):
        db = Handle(engine, memory_config)
        assert db.open("x.db")
        assert db.store(b"a", b"1")
        assert db.open("x.db")
        assert db.store(b"b", b"2")
        assert db.close()

        other = Handle(engine, memory_config)
        assert other.open("x.db")
        assert other.store(b"c", b"3")
        assert other.last_result_code is ResultCode.OK
        assert other.fetch(b"a") == b"1"
        assert other.fetch(b"b") == b"2"
        other.close()

    def test_read_write_on_missing_database(self, engine, memory_config):
        db = Handle(engine, memory_config)
        assert not db.open("missing.db", OpenMode.READ_WRITE)
        assert db.last_result_code is ResultCode.CANNOT_OPEN
        assert not db.is_open

    def test_named_database_persists_across_handles(self, engine, memory_config):
        first = Handle(engine, memory_config)
        assert first.open("data.db", OpenMode.CREATE)
        assert first.store(b"k", b"v")
        assert first.close()

        second = Handle(engine, memory_config)
        assert second.open("data.db", OpenMode.READ_WRITE)
        assert second.fetch(b"k") == b"v"
        assert second.close()

    def test_mem_databases_are_private(self, engine, memory_config):
        first = Handle(engine, memory_config)
        second = Handle(engine, memory_config)
        first.open(":mem:")
        second.open(":mem:")
        first.store(b"k", b"v")
        assert second.fetch(b"k") == b""
        assert second.last_result_code is ResultCode.NOT_FOUND

    def test_read_only_rejects_writes(self, engine, memory_config):
        writer = Handle(engine, memory_config)
        writer.open("ro.db", OpenMode.CREATE)
        writer.store(b"k", b"v")
        writer.close()

        for mode in (OpenMode.READ_ONLY, OpenMode.READ_ONLY_WITH_MMAP):
            reader = Handle(engine, memory_config)
            assert reader.open("ro.db", mode)
            assert reader.fetch(b"k") == b"v"
            assert not reader.store(b"k", b"other")
            assert reader.last_result_code is ResultCode.IS_READ_ONLY
            assert not reader.append(b"k", b"other")
            assert not reader.remove(b"k")
            assert reader.last_result_code is ResultCode.IS_READ_ONLY
            assert not reader.commit()
            assert reader.last_result_code is ResultCode.IS_READ_ONLY
            reader.close()

    def test_context_manager_closes(self, engine, memory_config):
        with Handle(engine, memory_config) as db:
            db.open(":mem:")
            assert db.is_open
        assert not db.is_open

    def test_engine_from_config(self):
        db = Handle(config=Config(engine="memory-hash"))
        assert isinstance(db.engine, MemoryEngine)
        assert db.engine.name == "memory-hash"

    def test_repr(self, db):
        assert "':mem:'" in repr(db)
        assert "open" in repr(db)


class TestKeyValue:

    @pytest.mark.parametrize("key,value", [
        (b"key", b"value"),
        (b"k", b""),
        (b"\x00\xff\x10", b"\x00\x01\x02\xfe\xff"),
        (b"long", b"x" * 100000),
        ("unicode-ключ", "значение"),
    ])
    def test_store_then_fetch(self, db, key, value):
        assert db.store(key, value)
        expected = value.encode("utf-8") if isinstance(value, str) else value
        assert db.fetch(key) == expected
        assert db.last_result_code is ResultCode.OK

    def test_store_overwrites(self, db):
        db.store(b"k", b"one")
        db.store(b"k", b"two")
        assert db.fetch(b"k") == b"two"

    def test_append_concatenates(self, db):
        assert db.append(b"k", b"one")
        assert db.append(b"k", b"two")
        assert db.append(b"k", b"three")
        assert db.fetch(b"k") == b"onetwothree"

    def test_append_after_store(self, db):
        db.store(b"k", b"base")
        db.append(b"k", b"+")
        assert db.fetch(b"k") == b"base+"

    def test_remove_then_fetch(self, db):
        db.store(b"k", b"v")
        assert db.remove(b"k")
        assert db.fetch(b"k") == b""
        assert db.last_result_code is ResultCode.NOT_FOUND

    def test_remove_missing(self, db):
        assert not db.remove(b"nope")
        assert db.last_result_code is ResultCode.NOT_FOUND

    def test_missing_and_empty_differ_only_by_code(self, db):
        db.store(b"empty", b"")
        assert db.fetch(b"empty") == b""
        assert db.last_result_code is ResultCode.OK
        assert db.fetch(b"missing") == b""
        assert db.last_result_code is ResultCode.NOT_FOUND

    def test_empty_key(self, db):
        assert not db.store(b"", b"v")
        assert db.last_result_code is ResultCode.EMPTY

    def test_fetch_text(self, db):
        db.store("greeting", "héllo")
        assert db.fetch_text("greeting") == "héllo"

    def test_failure_then_success_resets_code(self, db):
        db.fetch(b"missing")
        assert db.last_result_code is ResultCode.NOT_FOUND
        db.store(b"k", b"v")
        assert db.last_result_code is ResultCode.OK


class TestTransactions:

    def test_rollback_reverts(self, db):
        db.store(b"keep", b"1")
        assert db.commit()

        assert db.begin()
        db.store(b"keep", b"changed")
        db.store(b"new", b"2")
        db.remove(b"keep")
        assert db.rollback()

        assert db.fetch(b"keep") == b"1"
        assert db.fetch(b"new") == b""
        assert db.last_result_code is ResultCode.NOT_FOUND

    def test_rollback_reverts_implicit_transaction(self, db):
        db.store(b"k", b"v")
        assert db.rollback()
        assert db.fetch(b"k") == b""

    def test_commit_keeps(self, db):
        db.begin()
        db.store(b"k", b"v")
        assert db.commit()
        assert db.rollback()
        assert db.fetch(b"k") == b"v"

    def test_begin_twice_is_noop(self, db):
        assert db.begin()
        assert db.begin()
        assert db.last_result_code is ResultCode.OK

    def test_close_commits(self, engine, memory_config):
        db = Handle(engine, memory_config)
        db.open("t.db")
        db.store(b"k", b"v")
        db.close()

        db.open("t.db")
        assert db.fetch(b"k") == b"v"
        db.close()

    def test_close_rolls_back_without_auto_commit(self, engine, memory_config):
        db = Handle(engine, memory_config)
        db.open("t.db")
        db.store(b"old", b"v")
        db.close()

        db.open("t.db")
        assert db.disable_auto_commit()
        db.store(b"new", b"v")
        db.close()

        db.open("t.db")
        assert db.fetch(b"old") == b"v"
        assert db.fetch(b"new") == b""
        db.close()

    def test_auto_commit_off_from_config(self, engine):
        config = Config(engine="memory", auto_commit=False)
        db = Handle(engine, config)
        assert db.open("t.db")
        db.store(b"k", b"v")
        db.close()

        db.open("t.db")
        assert db.fetch(b"k") == b""
        assert db.last_result_code is ResultCode.NOT_FOUND

    def test_transaction_context_commits(self, db):
        with db.transaction():
            db.store(b"a", b"1")
            db.store(b"b", b"2")
        db.rollback()
        assert db.fetch(b"a") == b"1"
        assert db.fetch(b"b") == b"2"

    def test_transaction_context_rolls_back_on_error(self, db):
        db.store(b"a", b"1")
        db.commit()
        with pytest.raises(RuntimeError):
            with db.transaction():
                db.store(b"a", b"changed")
                raise RuntimeError("boom")
        assert db.fetch(b"a") == b"1"

    def test_write_lock_gives_busy(self, engine, memory_config):
        first = Handle(engine, memory_config)
        second = Handle(engine, memory_config)
        first.open("shared.db")
        second.open("shared.db")

        assert first.store(b"k", b"1")
        assert not second.store(b"k", b"2")
        assert second.last_result_code is ResultCode.BUSY
        assert not second.begin()
        assert second.last_result_code is ResultCode.BUSY

        first.commit()
        assert second.store(b"k", b"2")
        second.commit()
        assert first.fetch(b"k") == b"2"

    def test_transaction_context_reports_busy(self, engine, memory_config):
        first = Handle(engine, memory_config)
        second = Handle(engine, memory_config)
        first.open("shared.db")
        second.open("shared.db")
        assert first.store(b"k", b"1")

        with second.transaction():
            assert not second.store(b"k", b"2")
        assert second.last_result_code is ResultCode.BUSY

        first.commit()
        assert second.fetch(b"k") == b"1"

    def test_transaction_context_rolls_back_after_failed_write(self, db):
        db.store(b"a", b"1")
        db.commit()

        with db.transaction():
            db.store(b"a", b"changed")
            assert not db.store(b"", b"v")
            db.store(b"b", b"2")
        assert db.last_result_code is ResultCode.EMPTY

        assert db.fetch(b"a") == b"1"
        assert db.fetch(b"b") == b""

    def test_transaction_context_ignores_lookup_misses(self, db):
        with db.transaction():
            db.store(b"a", b"1")
            assert db.fetch(b"missing") == b""
            assert not db.remove(b"missing")
        assert db.last_result_code is ResultCode.OK
        db.rollback()
        assert db.fetch(b"a") == b"1"

    def test_nested_transaction_context_joins_outer(self, db):
        with db.transaction():
            db.store(b"a", b"1")
            with db.transaction():
                db.store(b"b", b"2")
            db.rollback()
            db.store(b"c", b"3")
        assert db.fetch(b"a") == b""
        assert db.fetch(b"c") == b"3"

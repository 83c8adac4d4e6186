import json
import tempfile
import unittest
from datetime import date, datetime
from pathlib import Path

from apodbg.config import CACHE_KEY, LAST_VISIT_KEY
from apodbg.models import CacheRecord
from apodbg.storage import BackgroundCache, JsonFileStore, MemoryStore


TODAY = date(2026, 10, 19)
YESTERDAY = date(2026, 10, 18)


class TestCacheRecord(unittest.TestCase):
    def test_round_trip_keeps_browser_field_names(self):
        record = CacheRecord("data:image/jpeg;base64,AAAA", TODAY, width=1200, height=800)
        data = record.to_json()
        self.assertEqual(
            data,
            {"imageUrl": "data:image/jpeg;base64,AAAA", "date": "2026-10-19", "width": 1200, "height": 800},
        )
        self.assertEqual(CacheRecord.from_json(data), record)

    def test_unprocessed_record_has_no_dimensions(self):
        data = CacheRecord("https://apod.nasa.gov/apod/image/x.jpg", TODAY).to_json()
        self.assertNotIn("width", data)
        self.assertNotIn("height", data)

    def test_legacy_timestamp(self):
        moment = datetime(2026, 10, 19, 12, 0)
        record = CacheRecord.from_json(
            {"imageUrl": "https://x/y.jpg", "timestamp": moment.timestamp() * 1000}
        )
        self.assertEqual(record.date, TODAY)

    def test_rejects_malformed(self):
        for data in ([], {}, {"imageUrl": "x"}, {"date": "2026-10-19"}, {"imageUrl": "x", "date": "soon"}):
            with self.subTest(data=data), self.assertRaises(ValueError):
                CacheRecord.from_json(data)


class TestBackgroundCache(unittest.TestCase):
    def setUp(self):
        self.store = MemoryStore()
        self.cache = BackgroundCache(self.store)

    def test_empty(self):
        self.assertIsNone(self.cache.read())

    def test_write_then_read(self):
        record = CacheRecord("https://apod.nasa.gov/apod/image/x.jpg", TODAY)
        self.cache.write(record)
        self.assertEqual(self.cache.read(), record)
        self.assertEqual(json.loads(self.store.get(CACHE_KEY))["date"], "2026-10-19")

    def test_write_overwrites(self):
        self.cache.write(CacheRecord("https://a/1.jpg", YESTERDAY))
        self.cache.write(CacheRecord("https://a/2.jpg", TODAY))
        self.assertEqual(self.cache.read().image_url, "https://a/2.jpg")

    def test_malformed_is_empty(self):
        self.store.set(CACHE_KEY, "{not json")
        self.assertIsNone(self.cache.read())
        self.store.set(CACHE_KEY, '{"imageUrl": 3}')
        self.assertIsNone(self.cache.read())

    def test_validity_is_date_equality(self):
        self.assertTrue(self.cache.is_valid(CacheRecord("https://a/1.jpg", TODAY), TODAY))
        self.assertFalse(self.cache.is_valid(CacheRecord("https://a/1.jpg", YESTERDAY), TODAY))
        self.assertFalse(self.cache.is_valid(CacheRecord("", TODAY), TODAY))
        self.assertFalse(self.cache.is_valid(None, TODAY))

    def test_first_visit_of_the_day_clears(self):
        self.store.set(LAST_VISIT_KEY, "2026-10-18")
        self.cache.write(CacheRecord("https://a/1.jpg", TODAY))

        self.assertTrue(self.cache.check_last_visit(TODAY))

        self.assertIsNone(self.cache.read())
        self.assertEqual(self.store.get(LAST_VISIT_KEY), "2026-10-19")

    def test_repeat_visit_keeps_record(self):
        self.store.set(LAST_VISIT_KEY, "2026-10-19")
        record = CacheRecord("https://a/1.jpg", TODAY)
        self.cache.write(record)

        self.assertFalse(self.cache.check_last_visit(TODAY))

        self.assertEqual(self.cache.read(), record)

    def test_reset(self):
        self.cache.check_last_visit(TODAY)
        self.cache.write(CacheRecord("https://a/1.jpg", TODAY))
        self.cache.reset()
        self.assertEqual(list(self.store.keys()), [])


class TestJsonFileStore(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name, "nested", "storage.json")

    def tearDown(self):
        self.tmp.cleanup()

    def test_persists_between_instances(self):
        store = JsonFileStore(self.path)
        store.set("a", "1")
        store.set("b", "2")
        store.remove("a")

        reopened = JsonFileStore(self.path)
        self.assertIsNone(reopened.get("a"))
        self.assertEqual(reopened.get("b"), "2")
        self.assertEqual(list(reopened.keys()), ["b"])

    def test_corrupt_file_starts_empty(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{{{", encoding="utf8")

        store = JsonFileStore(self.path)
        self.assertEqual(list(store.keys()), [])

        store.set("a", "1")
        self.assertEqual(json.loads(self.path.read_text(encoding="utf8")), {"a": "1"})

    def test_non_string_values_are_dropped(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text('{"a": "1", "b": 2}', encoding="utf8")
        self.assertEqual(list(JsonFileStore(self.path).keys()), ["a"])

    def test_non_object_file_starts_empty(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text('["a", "b"]', encoding="utf8")
        with self.assertLogs("APODBackground", level="WARNING"):
            store = JsonFileStore(self.path)
        self.assertEqual(list(store.keys()), [])


if __name__ == "__main__":
    unittest.main()

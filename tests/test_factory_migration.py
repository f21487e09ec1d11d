import unittest

from freezegun import freeze_time

from ledgerdoc.ids import SequentialIdGenerator
from ledgerdoc.pipeline.factory import create_empty_v2_data, create_portfolio
from ledgerdoc.pipeline.migration import migrate_to_v2

FROZEN = "2026-03-04T05:06:07.890Z"


@freeze_time(FROZEN)
class PortfolioFactoryTests(unittest.TestCase):
    def test_create_portfolio_defaults(self):
        p = create_portfolio(id_generator=SequentialIdGenerator())
        self.assertEqual(
            p,
            {
                "id": "00000000-0000-4000-8000-000000000001",
                "name": "新账本",
                "createdAt": FROZEN,
                "funds": [],
                "favorites": [],
                "groups": [],
                "holdings": {},
                "pendingTrades": [],
            },
        )

    def test_create_portfolio_name(self):
        self.assertEqual(create_portfolio("养老").get("name"), "养老")
        self.assertEqual(create_portfolio("").get("name"), "新账本")

    def test_create_portfolio_collections_not_shared(self):
        a = create_portfolio()
        b = create_portfolio()
        a["funds"].append({"code": "A"})
        a["holdings"]["A"] = {}
        self.assertEqual(b["funds"], [])
        self.assertEqual(b["holdings"], {})
        self.assertNotEqual(a["id"], b["id"])

    def test_create_empty_v2_data(self):
        doc = create_empty_v2_data()
        self.assertEqual(doc["version"], 2)
        self.assertEqual(doc["refreshMs"], 30000)
        self.assertEqual(len(doc["portfolios"]), 1)
        self.assertEqual(doc["portfolios"][0]["name"], "默认账本")
        self.assertEqual(doc["portfolios"][0]["createdAt"], FROZEN)


@freeze_time(FROZEN)
class MigrateToV2Tests(unittest.TestCase):
    def test_refresh_below_floor_defaults(self):
        doc = migrate_to_v2({"funds": [{"code": "A"}], "refreshMs": 1000})
        self.assertEqual(doc["refreshMs"], 30000)
        self.assertEqual(doc["portfolios"][0]["funds"], [{"code": "A"}])

    def test_refresh_kept_when_valid(self):
        self.assertEqual(migrate_to_v2({"funds": [], "refreshMs": 5000})["refreshMs"], 5000)
        self.assertEqual(migrate_to_v2({"funds": [], "refreshMs": 60000})["refreshMs"], 60000)
        self.assertEqual(migrate_to_v2({"funds": [], "refreshMs": "60000"})["refreshMs"], 30000)
        self.assertEqual(migrate_to_v2({"funds": [], "refreshMs": True})["refreshMs"], 30000)

    def test_collections_carried_verbatim(self):
        legacy = {
            "funds": [{"code": "A"}, {"code": "A"}, {"code": "B"}],
            "favorites": ["A", "Z"],
            "groups": [{"id": "g1", "codes": ["Z"]}],
            "holdings": {"Z": {"share": 1}},
            "pendingTrades": [{"fundCode": "Z"}],
        }
        doc = migrate_to_v2(legacy, "旧数据", id_generator=SequentialIdGenerator())
        p = doc["portfolios"][0]
        self.assertEqual(doc["version"], 2)
        self.assertEqual(p["id"], "00000000-0000-4000-8000-000000000001")
        self.assertEqual(p["name"], "旧数据")
        self.assertEqual(p["createdAt"], FROZEN)
        for key in ("funds", "favorites", "groups", "holdings", "pendingTrades"):
            self.assertEqual(p[key], legacy[key])

    def test_wrong_types_default(self):
        doc = migrate_to_v2({"funds": {"A": 1}, "favorites": "A", "groups": None, "holdings": [], "pendingTrades": {}})
        p = doc["portfolios"][0]
        self.assertEqual(p["funds"], [])
        self.assertEqual(p["favorites"], [])
        self.assertEqual(p["groups"], [])
        self.assertEqual(p["holdings"], {})
        self.assertEqual(p["pendingTrades"], [])
        self.assertEqual(p["name"], "默认账本")

    def test_not_idempotent(self):
        legacy = {"funds": []}
        first = migrate_to_v2(legacy)
        second = migrate_to_v2(legacy)
        self.assertNotEqual(first["portfolios"][0]["id"], second["portfolios"][0]["id"])

    def test_non_object_input(self):
        doc = migrate_to_v2(None)
        self.assertEqual(len(doc["portfolios"]), 1)
        self.assertEqual(doc["portfolios"][0]["funds"], [])


if __name__ == "__main__":
    unittest.main()

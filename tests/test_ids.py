import random
import re
import unittest
from unittest.mock import patch

from ledgerdoc.ids import SequentialIdGenerator, UuidGenerator, generate_id

UUID4_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


class IdGeneratorTests(unittest.TestCase):
    def test_generate_id_is_uuid4(self):
        self.assertRegex(generate_id(), UUID4_RE)

    def test_generate_id_unique(self):
        ids = {generate_id() for _ in range(200)}
        self.assertEqual(len(ids), 200)

    def test_fallback_template(self):
        gen = UuidGenerator(rng=random.Random(7))
        for _ in range(50):
            self.assertRegex(gen.fallback_id(), UUID4_RE)

    def test_fallback_used_without_os_randomness(self):
        gen = UuidGenerator(rng=random.Random(1))
        with patch("ledgerdoc.ids.uuid.uuid4", side_effect=NotImplementedError):
            first = gen.new_id()
            second = gen.new_id()
        self.assertRegex(first, UUID4_RE)
        self.assertNotEqual(first, second)

    def test_sequential_generator(self):
        gen = SequentialIdGenerator()
        self.assertEqual(generate_id(gen), "00000000-0000-4000-8000-000000000001")
        self.assertEqual(generate_id(gen), "00000000-0000-4000-8000-000000000002")
        self.assertRegex(gen.new_id(), UUID4_RE)


if __name__ == "__main__":
    unittest.main()

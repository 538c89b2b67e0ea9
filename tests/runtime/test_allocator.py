import unittest
from sgemm.errors import AllocationFailure
from sgemm.runtime.allocator import MemoryPool, ALIGNMENT


class TestMemoryPool(unittest.TestCase):
    def test_contiguous_allocation(self):
        # Blocks are handed out back to back, each rounded up to ALIGNMENT
        pool = MemoryPool()
        addr1 = pool.alloc("A", 1024)
        addr2 = pool.alloc("B", 100)
        addr3 = pool.alloc("C", 16)
        self.assertEqual(addr1, 0)
        self.assertEqual(addr2, 1024)
        self.assertEqual(addr3, 1024 + ALIGNMENT)
        self.assertEqual(pool.size("B"), ALIGNMENT)

    def test_out_of_memory(self):
        pool = MemoryPool(capacity=2048)
        pool.alloc("A", 1024)
        pool.alloc("B", 1024)
        with self.assertRaises(AllocationFailure):
            pool.alloc("C", 1)
        # Failed allocation leaves the pool untouched
        self.assertEqual(pool.used(), 2048)
        self.assertNotIn("C", pool.memory_map)

    def test_out_of_memory_is_memory_error(self):
        pool = MemoryPool(capacity=ALIGNMENT)
        with self.assertRaises(MemoryError):
            pool.alloc("big", ALIGNMENT + 1)

    def test_free_reuses_block_first_fit(self):
        pool = MemoryPool()
        pool.alloc("A", 512)
        pool.alloc("B", 512)
        pool.alloc("C", 512)
        self.assertEqual(pool.free("A"), (0, 512))
        self.assertEqual(pool.alloc("D", 256), 0)
        self.assertEqual(pool.alloc("E", 256), 256)
        self.assertEqual(pool.free_list, [])

    def test_free_unknown_returns_none(self):
        pool = MemoryPool()
        self.assertIsNone(pool.free("missing"))

    def test_duplicate_name_rejected(self):
        pool = MemoryPool()
        pool.alloc("A", 16)
        with self.assertRaises(ValueError):
            pool.alloc("A", 16)

    def test_free_all_returns_to_baseline(self):
        # Freed neighbours coalesce, so staging cycles never fragment the pool
        pool = MemoryPool(capacity=3 * 1024)
        for _ in range(10):
            for name in ("A", "B", "C"):
                pool.alloc(name, 1024)
            for name in ("B", "A", "C"):
                pool.free(name)
            self.assertEqual(pool.used(), 0)
            self.assertEqual(pool.next_free_addr, 0)
            self.assertEqual(pool.free_list, [])

    def test_coalesce_middle_hole(self):
        pool = MemoryPool()
        pool.alloc("A", 256)
        pool.alloc("B", 256)
        pool.alloc("C", 256)
        pool.alloc("D", 256)
        pool.free("B")
        pool.free("C")
        self.assertEqual(pool.free_list, [(256, 512)])
        self.assertEqual(pool.alloc("E", 512), 256)

    def test_reset(self):
        pool = MemoryPool()
        pool.alloc("A", 256)
        pool.alloc("B", 256)
        pool.free("A")
        pool.reset()
        self.assertEqual(pool.used(), 0)
        self.assertEqual(pool.next_free_addr, 0)
        self.assertEqual(pool.free_list, [])
        self.assertEqual(pool.alloc("X", 1), 0)
        self.assertEqual(pool.get("X"), 0)

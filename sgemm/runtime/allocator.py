# allocator.py
# ---------------------------------------------
# Bookkeeping for accelerator global memory with free() support.
# Addresses are byte offsets into the device's staging pool.
# Every block is rounded up to ALIGNMENT bytes like cudaMalloc does.
# ---------------------------------------------

from sgemm.errors import AllocationFailure

DEFAULT_POOL_BYTES = 1 << 30
ALIGNMENT = 256


def _align(nbytes):
    return (nbytes + ALIGNMENT - 1) // ALIGNMENT * ALIGNMENT


class MemoryPool:
    def __init__(self, capacity=DEFAULT_POOL_BYTES):
        self.capacity = capacity
        self.next_free_addr = 0
        self.memory_map = {}    # name -> (addr, size)
        self.free_list = []     # [(addr, size), ...] sorted by addr, coalesced

    def alloc(self, name, nbytes):
        """
        Reserve 'nbytes' contiguous bytes under 'name'.
        Returns the starting byte address.

        Uses first-fit strategy: checks free list first, then bump allocates.
        """
        if name in self.memory_map:
            raise ValueError(f"Allocation '{name}' already exists")
        size = _align(max(nbytes, 1))

        for i, (free_addr, free_size) in enumerate(self.free_list):
            if free_size >= size:
                if free_size > size:
                    self.free_list[i] = (free_addr + size, free_size - size)
                else:
                    self.free_list.pop(i)
                self.memory_map[name] = (free_addr, size)
                return free_addr

        if (self.next_free_addr + size) > self.capacity:
            raise AllocationFailure(
                f"Out of device memory: cannot allocate {nbytes} bytes for '{name}'. "
                f"In use: {self.used()} of {self.capacity}, free list: {len(self.free_list)} blocks"
            )

        addr = self.next_free_addr
        self.next_free_addr += size
        self.memory_map[name] = (addr, size)
        return addr

    def free(self, name):
        """
        Release a previously allocated block, making it available for reuse.

        Returns:
            Tuple of (addr, size) that was freed, or None if not found
        """
        if name not in self.memory_map:
            return None

        addr, size = self.memory_map.pop(name)
        self._release(addr, size)
        return (addr, size)

    def _release(self, addr, size):
        blocks = sorted(self.free_list + [(addr, size)])
        merged = []
        for block_addr, block_size in blocks:
            if merged and merged[-1][0] + merged[-1][1] == block_addr:
                prev_addr, prev_size = merged.pop()
                merged.append((prev_addr, prev_size + block_size))
            else:
                merged.append((block_addr, block_size))

        # A free block touching the bump pointer goes back to the untouched region
        if merged and merged[-1][0] + merged[-1][1] == self.next_free_addr:
            self.next_free_addr = merged.pop()[0]
        self.free_list = merged

    def get(self, name):
        """Get the starting address of a live allocation."""
        return self.memory_map[name][0]

    def size(self, name):
        """Get size (bytes, aligned) of a live allocation."""
        return self.memory_map[name][1]

    def used(self):
        """Total bytes currently allocated (excludes freed blocks)."""
        return sum(size for _, size in self.memory_map.values())

    def reset(self):
        self.next_free_addr = 0
        self.memory_map.clear()
        self.free_list.clear()

    def dump(self):
        """Print the memory map."""
        print("\n==== DEVICE MEMORY MAP ====\n")
        for name, (addr, size) in self.memory_map.items():
            print(f"{name:<15} : addr={addr:#010x}, size={size} bytes")
        print(f"\nAllocated: {self.used()} bytes")
        print(f"High water mark: {self.next_free_addr} bytes")
        print(f"Free list: {len(self.free_list)} blocks, {sum(s for _, s in self.free_list)} bytes")
        print(f"Capacity: {self.capacity} bytes\n")

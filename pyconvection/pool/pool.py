"""
Taichi Field Pool Module

Owned pools of flat Taichi fields. Every field is created through its own
ti.FieldsBuilder so that it can be destroyed independently and its device
memory returned. Fields are organised by (dtype, size) and reused once
released.

A pool belongs to one object (typically a ConvectiveParameterization) rather
than to the process: ti.init() invalidates every field, and a process-wide
pool would keep handing those out.

Author: B. Gailleton
"""

import logging
from typing import Any, Dict, List, Tuple

import taichi as ti

logger = logging.getLogger(__name__)


class TPField:
    """
    Pooled flat Taichi field.

    Attributes:
        field: Underlying Taichi field (1D, or 0D when size is 0)
        dtype: Taichi data type
        size: Number of entries, 0 for a scalar field
        in_use: Whether the field is currently handed out
        snodetree: Finalized field structure, None once destroyed

    Author: B. Gailleton
    """

    def __init__(self, dtype: Any, size: int):
        self.dtype = dtype
        self.size = int(size)
        self.in_use = False

        self.fb = ti.FieldsBuilder()
        self.field = ti.field(dtype)
        if self.size == 0:
            self.fb.place(self.field)
        else:
            self.fb.dense(ti.i, self.size).place(self.field)
        self.snodetree = self.fb.finalize()

    def acquire(self):
        self.in_use = True

    def release(self):
        """Make the field available again. Does not free memory."""
        self.in_use = False

    def destroy(self):
        """Free the device memory of this field."""
        if self.snodetree is not None:
            self.snodetree.destroy()
            self.snodetree = None

    def to_numpy(self):
        return self.field.to_numpy()

    def from_numpy(self, val):
        return self.field.from_numpy(val)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False

    def __str__(self):
        return f"Pooled Taichi field - in_use:{self.in_use} - dtype:{self.dtype} - size:{self.size}"


class FieldPool:
    """
    Pool of TPField objects keyed by (dtype, size).

    Usage:
        pool = FieldPool()
        flags = pool.get(ti.u8, n)          # kept for the whole run
        with pool.get(ti.f32, n) as tmp:    # released on exit
            some_kernel(tmp.field)
        pool.destroy()

    Author: B. Gailleton
    """

    def __init__(self):
        self._pools: Dict[Tuple[Any, int], List[TPField]] = {}

    def get(self, dtype: Any, size: int) -> TPField:
        """Return an unused field of the given dtype and size, creating one if needed."""
        key = (dtype, int(size))
        pool = self._pools.setdefault(key, [])

        for tpfield in pool:
            if not tpfield.in_use:
                tpfield.acquire()
                return tpfield

        tpfield = TPField(dtype, size)
        pool.append(tpfield)
        tpfield.acquire()
        return tpfield

    def stats(self) -> dict:
        """Counts of total, in use and available fields."""
        total = sum(len(pool) for pool in self._pools.values())
        in_use = sum(1 for pool in self._pools.values() for tpf in pool if tpf.in_use)
        return {"total": total, "in_use": in_use, "available": total - in_use}

    def destroy(self):
        """Destroy every field, in use or not, and empty the pool."""
        n = 0
        for pool in self._pools.values():
            for tpfield in pool:
                tpfield.destroy()
                n += 1
        self._pools.clear()
        logger.debug("Destroyed %d pooled fields", n)

# rastermap:errors.py

# MIT License
#
# Copyright (c) 2025 Jonas Waldeck
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND.

from __future__ import annotations


class InvalidDepth(ValueError):
    """Depth is outside the tile scheme's constants table."""

    def __init__(self, depth: int, num_depths: int) -> None:
        self.depth = depth
        self.num_depths = num_depths
        super().__init__(f"depth out of range: {depth} (valid: 0..{num_depths - 1})")

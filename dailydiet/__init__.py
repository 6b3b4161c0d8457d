# -*- coding: utf-8 -*-
"""Daily diet — personal meal tracking backend."""

__version__ = "1.0.0"

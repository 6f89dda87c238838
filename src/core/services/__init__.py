"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/interfaces/*
- src/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
Import submodules directly; entities depend on ``totals`` so this package
must not import anything at load time.
"""

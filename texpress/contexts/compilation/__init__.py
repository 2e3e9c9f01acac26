"""
Compilation Context

Responsibilities:
- Defines the uniform compilation strategy contract and its concrete backends
- Orchestrates fallback across strategies in preference order
- Caches recent results and bounds preview requests by wall-clock time

Owns: Backend selection, per-attempt isolation, quality tier reporting
Never: Decides what the markup says (parsing) or how a page looks (rendering)
"""

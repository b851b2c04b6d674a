"""RealTalk Draft backend services.

- Risk Service: heuristic risk assessment of drafts (pure, no I/O)
- Rewrite Service: prompt selection, LLM rewrites and templated fallbacks
- Usage Service: monthly per-user quota ledger
"""

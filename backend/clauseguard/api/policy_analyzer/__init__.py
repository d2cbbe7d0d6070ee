"""Policy analyzer module: chunking, LLM calls, reply normalization and merging.

Entry points live in ``chain`` (``analyze_policy``, ``analyze_policy_with_llm``,
``analyze_policy_tool``) and ``router``. They are not re-exported here because
the Valkey stores import this package's models.
"""

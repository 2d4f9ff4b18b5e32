"""
Core pipeline for medspec.

- normalize: repair raw model output
- validator: schema enforcement and default injection
- context: UX signal derivation
- evaluator: rulebook evaluation
- integrator: folding UX decisions into the spec
- pipeline: the five stages end to end
"""

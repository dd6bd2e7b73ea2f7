"""
Step bodies — one module per ``StepKind``, each exposing ``run(ctx)``.
"""

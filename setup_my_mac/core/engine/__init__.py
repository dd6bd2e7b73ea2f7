"""
Step execution engine — sudo ticket, command streaming, step
registry, per-step context and the runner that sequences it all.
"""

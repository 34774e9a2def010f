"""
Board core.

Components:
- task_models.py: data structures (Task, TaskBehavior, defaults, reports)
- persistence.py: serialization over the key-value store + ordered write-through
- task_store.py: canonical task collection, mutations, subscriptions
- feedback.py: progress / completion and edge-triggered celebration
- handoff.py: completion signals from the external action view
- prioritize.py: AI reprioritization workflow (phase machine)
- dispatcher.py: routes a task activation to its behavior
- celebration.py: confetti particles
"""

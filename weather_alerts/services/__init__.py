"""Domain services: weather client, alert store, evaluator, scheduler."""

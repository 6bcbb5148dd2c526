"""
grandma: a GRANDPA finality monitor for Substrate nodes.

Watches a node's justifications and reports which validators precommitted
in each round, or prints a one-off snapshot of the round in progress.
"""

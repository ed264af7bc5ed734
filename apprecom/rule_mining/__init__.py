"""
Rule Mining Module

Mines directed rules between location and app categories:
- Itemset counting and support pruning
- Confidence-based rule generation with an explicit direction policy
"""

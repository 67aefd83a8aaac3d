"""
Shop-floor ingestion: CAD cut-list export -> work order entity graph.

Pipeline: field resolver -> tree builder -> selection with quantity
expansion, cross-reference and duplicate resolution -> one atomic commit ->
categorizer pass.
"""

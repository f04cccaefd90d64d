"""PuLP backend and the MLSP formulation"""

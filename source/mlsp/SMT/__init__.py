"""z3 backend"""

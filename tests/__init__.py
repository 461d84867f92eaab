"""
Test suite for the OLS atom selector.

Checks the greedy selection against direct least-squares fits and the
invariants of Orthogonal Least Squares:
- Chen, Billings & Luo (1989) - Orthogonal least squares methods and their
  application to non-linear system identification
"""

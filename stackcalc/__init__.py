"""stackcalc — integer and polynomial expression calculator.

Two stack-based evaluators behind one service: integer expressions over
+ - * / ^ with parentheses and |absolute value| bars, and expressions over a
small registry of named single-variable polynomials.

Usage:
    python -m stackcalc calc "3+4*2"        # 11
    python -m stackcalc define a 2,1,3,0    # a = 2,2,1,3,0
    python -m stackcalc poly "a*a"          # Polynomial expression
    python -m stackcalc shell               # Interactive session
"""

__version__ = "0.1.0"

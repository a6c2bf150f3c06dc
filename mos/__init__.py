"""mos: an interpreter for a small untyped lambda calculus with literals and native operations.

Basic program flow:
    1. Parser: turns source text into a Program of Bind/Print statements by recursive descent
        - For the grammar, see mos/lang/parser.py
    2. Session: keeps the binding context (builtins first, then every Bind, in order) and feeds each Print statement's
       term to the reducer
    3. Reducer: call-by-name reduction of a term to weak head normal form, see mos/pure/reducer.py

"""

__version__ = "0.1.0"

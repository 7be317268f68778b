#!/usr/bin/env python3
"""
Main test runner for the Kaleidoscope front end.

Runs the lexer and parser over a few sample programs, then the unit
test suite under tests/.

Author: xwest
"""

import sys
import os
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.dirname(__file__))
sys.path.insert(0, project_root)


SAMPLES = {
    "definitions": """
    # Compute the x'th fibonacci number.
    def fib(x)
      fib(x - 1) + fib(x - 2)

    extern sin(a);
    fib(10) * sin(1.5)
    """,
    "precedence": "1 + 2 * 3 - 4 < 5",
    "calls": "def f(a b c) a * b + c; f(1, 2, f(3, 4, 5))",
}

BROKEN_SAMPLES = {
    "duplicate parameter": "def f(x x) x",
    "unclosed paren": "def f(x) (1 +",
    "bad number": "1.2.3 + 4",
}


def run_samples():
    """Run the front end over the sample programs."""

    print("🚀 Kaleidoscope Front End Test Suite")
    print("=" * 60)

    try:
        from kaleidoscope.lexer.lexer import Lexer
        from kaleidoscope.parser.parser import Parser
        from kaleidoscope.parser.errors import ParseError

        print("✅ All front end modules imported successfully")
        print()

    except ImportError as e:
        print(f"❌ Failed to import front end modules: {e}")
        return False

    for name, code in SAMPLES.items():
        print(f"  📝 Testing {name}...")
        try:
            lexer = Lexer(code, f"<{name}>")
            tokens = Lexer(code).tokenize()
            print(f"     Generated {len(tokens)} tokens")

            program = Parser(lexer).parse()
            print(f"     Generated AST with {len(program.items)} top-level items")
            for line in str(program).splitlines():
                print(f"       {line}")

        except ParseError as e:
            print(f"     ❌ {name} failed:")
            print(e)
            return False

    print()
    print("  ❌ Testing error handling...")
    for name, code in BROKEN_SAMPLES.items():
        parser = Parser(Lexer(code, f"<{name}>"))
        try:
            parser.parse()
        except ParseError as e:
            print(f"     ✅ {name}: caught {e.code} {e.message}")
            continue

        print(f"     ❌ {name}: expected a parse error but got none")
        return False

    print()
    return True


def run_unit_tests():
    """Run the unittest suite under tests/."""
    suite = unittest.defaultTestLoader.discover(os.path.join(project_root, "tests"))
    result = unittest.TextTestRunner(verbosity=1).run(suite)
    return result.wasSuccessful()


if __name__ == "__main__":
    success = run_samples() and run_unit_tests()
    if success:
        print("🎉 All tests PASSED!")
    sys.exit(0 if success else 1)

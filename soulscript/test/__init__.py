"""
SoulScript test package

- test_lexer.py / test_parser.py: source text to tokens to AST
- test_values.py / test_evaluator.py / test_executor.py: runtime semantics
- test_registry.py / test_builtins.py / test_events.py / test_world.py /
  test_scheduler.py: the interpreter's tables
- test_logs.py / test_settings.py: ambient support
- test_interpreter.py: end-to-end scenarios and the command line
"""

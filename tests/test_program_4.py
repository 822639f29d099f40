from pathlib import Path

from plume.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_4_recursion(capsys):
    with open(EXAMPLES / 'program_4.plume', 'r', encoding='utf-8') as f:
        source = f.read()
    statements = parse_program(source)
    interp = Interpreter()
    interp.interpret(statements)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['55', '120']

import pytest

from plume.errors import PlumeRuntimeError, PlumeSyntaxError
from plume.interpreter import Interpreter, run_program


def run(source, capsys, interpreter=None):
    run_program(source, interpreter)
    return capsys.readouterr().out.strip().split('\n')


def runtime_error(source, interpreter=None):
    with pytest.raises(PlumeRuntimeError) as excinfo:
        run_program(source, interpreter)
    return str(excinfo.value)


@pytest.mark.parametrize('source, expected', [
    ('print 1 + 2 * 3 - 4 / 2;', '5'),
    ('print (1 + 2) * 3;', '9'),
    ('print 10 / 4;', '2.5'),
    ('print 2 * (3 + 4) / 7 - 1;', '1'),
    ('print -3 - -1.5;', '-1.5'),
])
def test_arithmetic(source, expected, capsys):
    assert run(source, capsys) == [expected]


def test_print_stringifies_values(capsys):
    source = 'print nil; print true; print false; print 3; print 2.5; print "txt"; fun f() {} print f; print clock;'
    assert run(source, capsys) == ['nil', 'true', 'false', '3', '2.5', 'txt', '<fn f>', '<native fn clock>']


def test_truthiness(capsys):
    source = '''
    if (0) print "0 is true";
    if ("") print "empty is true";
    if (nil) print "nil"; else print "nil is false";
    if (false) print "false"; else print "false is false";
    print !0;
    '''
    assert run(source, capsys) == ['0 is true', 'empty is true', 'nil is false', 'false is false', 'false']


def test_equality_never_coerces(capsys):
    source = '''
    print nil == nil;
    print nil == false;
    print 1 == "1";
    print true == 1;
    print "a" == "a";
    print 2 != 2;
    '''
    assert run(source, capsys) == ['true', 'false', 'false', 'false', 'true', 'false']


def test_logical_operators_return_deciding_operand(capsys):
    source = '''
    print nil or "fallback";
    print "first" or missing;
    print nil and missing;
    print 1 and 2;
    '''
    assert run(source, capsys) == ['fallback', 'first', 'nil', '2']


def test_plus_concatenates_when_either_side_is_text(capsys):
    source = 'print "a" + 1; print 1 + "a"; print "n" + nil; print "b" + true; print "x" + "y";'
    assert run(source, capsys) == ['a1', '1a', 'nnil', 'btrue', 'xy']


@pytest.mark.parametrize('source, message', [
    ('true + 1;', 'Operands must be two numbers or two strings.'),
    ('nil + nil;', 'Operands must be two numbers or two strings.'),
    ('"a" - 1;', 'Operands must be numbers.'),
    ('"a" < "b";', 'Operands must be numbers.'),
    ('2 * nil;', 'Operands must be numbers.'),
    ('-"a";', 'Operand must be a number.'),
])
def test_type_errors(source, message):
    assert runtime_error(source) == f'[line 1] Runtime error: {message}'


def test_division_by_zero_is_an_error():
    assert runtime_error('print 10 / 0;') == '[line 1] Runtime error: Division by zero.'


def test_zero_numerator_is_fine(capsys):
    assert run('print 0 / 5;', capsys) == ['0']


def test_block_scoping(capsys):
    assert run('var x = 1; { var x = 2; print x; } print x;', capsys) == ['2', '1']


def test_assignment_reaches_enclosing_scope(capsys):
    assert run('var x = 1; { x = 5; } print x;', capsys) == ['5']


def test_redeclaration_overwrites(capsys):
    assert run('var a = 1; var a = 2; print a;', capsys) == ['2']


def test_undefined_variable():
    assert runtime_error('print y;') == "[line 1] Runtime error: Undefined variable 'y'."


def test_assignment_never_declares():
    assert runtime_error('y = 1;') == "[line 1] Runtime error: Undefined variable 'y'."


def test_state_persists_across_interpret_calls(capsys):
    interpreter = Interpreter()
    run_program('var a = 1; fun inc() { a = a + 1; }', interpreter)
    run_program('inc(); inc();', interpreter)
    assert run('print a;', capsys, interpreter) == ['3']


def test_runtime_error_keeps_earlier_effects(capsys):
    interpreter = Interpreter()
    with pytest.raises(PlumeRuntimeError):
        run_program('var a = 1; a = 2; print a / 0; a = 3;', interpreter)
    assert run('print a;', capsys, interpreter) == ['2']


def test_closures_share_captured_environment(capsys):
    source = '''
    var get;
    var set;
    fun make() {
      var v = 0;
      fun g() { return v; }
      fun s(x) { v = x; }
      get = g;
      set = s;
    }
    make();
    set(5);
    print get();
    '''
    assert run(source, capsys) == ['5']


def test_closure_captures_by_reference(capsys):
    source = '''
    var x = "before";
    fun show() { print x; }
    x = "after";
    show();
    '''
    assert run(source, capsys) == ['after']


def test_return_unwinds_nested_blocks_and_loops(capsys):
    source = '''
    fun find() {
      var i = 0;
      while (true) {
        {
          if (i == 3) return i;
        }
        i = i + 1;
      }
    }
    print find();
    '''
    assert run(source, capsys) == ['3']


def test_return_from_for_loop(capsys):
    source = '''
    fun firstOver(limit) {
      for (var i = 0; ; i = i + 1) {
        if (i * i > limit) return i;
      }
    }
    print firstOver(10);
    '''
    assert run(source, capsys) == ['4']


def test_function_without_return_yields_nil(capsys):
    assert run('fun f() { 1; } print f();', capsys) == ['nil']


def test_bare_return_yields_nil(capsys):
    assert run('fun f() { return; print "unreachable"; } print f();', capsys) == ['nil']


def test_return_at_top_level_is_an_error():
    assert runtime_error('return 1;') == "[line 1] Runtime error: Can't return from top-level code."


def test_calling_a_non_function():
    assert runtime_error('"x"();') == '[line 1] Runtime error: Can only call functions.'


def test_arity_is_checked():
    assert runtime_error('fun f(a) {}\nf();') == '[line 2] Runtime error: Expected 1 arguments but got 0.'
    assert runtime_error('clock(1);') == '[line 1] Runtime error: Expected 0 arguments but got 1.'


def test_string_indexing(capsys):
    source = 'var s = "cat"; print s[0]; print s[1]; print "dog"[2];'
    assert run(source, capsys) == ['c', 'a', 'g']


@pytest.mark.parametrize('source, message', [
    ('"cat"[3];', 'String index 3 out of bounds.'),
    ('"cat"[-1];', 'String index -1 out of bounds.'),
    ('"cat"[1.5];', 'String index must be a whole number.'),
    ('"cat"["a"];', 'String index must be a whole number.'),
    ('5[0];', 'Only strings can be indexed, got number.'),
])
def test_indexing_errors(source, message):
    assert runtime_error(source) == f'[line 1] Runtime error: {message}'


def test_index_assignment_rebuilds_string(capsys):
    assert run('var s = "cat"; s[0] = "x"; print s;', capsys) == ['xat']


def test_index_assignment_yields_the_character(capsys):
    assert run('var s = "cat"; print s[2] = "p"; print s;', capsys) == ['p', 'cap']


def test_index_assignment_in_enclosing_scope(capsys):
    assert run('var s = "cat"; { s[2] = "r"; } print s;', capsys) == ['car']


@pytest.mark.parametrize('source, message', [
    ('var s = "cat"; s[0] = "xy";', 'Can only assign a single character to a string index.'),
    ('var s = "cat"; s[0] = 1;', 'Can only assign a single character to a string index.'),
    ('var s = "cat"; s[3] = "x";', 'String index 3 out of bounds.'),
    ('"cat"[0] = "x";', 'Invalid assignment target.'),
])
def test_index_assignment_errors(source, message):
    assert runtime_error(source) == f'[line 1] Runtime error: {message}'


def test_text_natives(capsys):
    assert run('print length("abcd"); print length(""); print concat("ab", "cd");', capsys) == ['4', '0', 'abcd']


def test_native_errors_report_call_line():
    assert runtime_error('\n\nlength(1);') == '[line 3] Runtime error: length expects a string, got number.'
    assert runtime_error('concat("a", nil);') == (
        '[line 1] Runtime error: concat expects two strings, got string and nil.')


def test_clock_returns_a_number(capsys):
    assert run('print clock() > 0;', capsys) == ['true']


def test_step_battle_invokes_hook(capsys):
    calls = []
    interpreter = Interpreter(battle_hook=lambda: calls.append('step'))
    assert run('stepBattle(); print stepBattle();', capsys, interpreter) == ['nil']
    assert calls == ['step', 'step']


def test_step_battle_without_hook_is_a_no_op(capsys):
    assert run('print stepBattle();', capsys) == ['nil']


def test_natives_can_be_shadowed(capsys):
    assert run('fun length(s) { return "mine"; } print length("x");', capsys) == ['mine']


def test_syntax_errors_prevent_execution(capsys):
    with pytest.raises(PlumeSyntaxError) as excinfo:
        run_program('print "ran"; print ;')
    assert len(excinfo.value.diagnostics) == 1
    assert capsys.readouterr().out == ''


def test_debug_trace_is_written(tmp_path, capsys):
    trace = tmp_path / 'debug.txt'
    interpreter = Interpreter(debug_level=3, debug_file=str(trace))
    run('var x = 1; fun f(a) { return a; } if (x) f(2);', capsys, interpreter)
    interpreter.close()
    lines = trace.read_text(encoding='utf-8').splitlines()
    assert 'declare x = 1' in lines
    assert 'define function f' in lines
    assert 'if condition 1 -> True' in lines
    assert 'call f(2)' in lines


def test_no_trace_file_without_debug(tmp_path):
    trace = tmp_path / 'debug.txt'
    Interpreter(debug_file=str(trace))
    assert not trace.exists()


def test_deep_recursion_within_limit(capsys):
    source = 'fun down(n) { if (n == 0) return 0; return down(n - 1) + 1; } print down(500);'
    assert run(source, capsys) == ['500']


def test_runaway_recursion_is_a_stack_overflow(capsys):
    interpreter = Interpreter()
    with pytest.raises(PlumeRuntimeError) as excinfo:
        run_program('fun down(n) { return down(n + 1); } down(0);', interpreter)
    assert str(excinfo.value) == '[line 1] Runtime error: Stack overflow.'
    assert run('print "alive";', capsys, interpreter) == ['alive']

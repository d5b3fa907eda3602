import pytest

from rcon_panel.util import DEFAULT_HOST, DEFAULT_PORT, read_properties, resolve_target, useable


@pytest.mark.parametrize('value,expected', [('', False), ('   ', False), ('\t\n ', False), ('a', True), (' a ', True), (None, False)])
def test_useable(value, expected):
    assert useable(value) is expected


def test_read_properties_skips_comments_and_blanks(tmp_path):
    path = tmp_path / 'server.properties'
    path.write_text('# comment\n\nrcon.port = 25575\nrcon.password=hunter2\nbogus line\n', encoding='utf-8')
    assert read_properties(path) == {'rcon.port': '25575', 'rcon.password': 'hunter2'}


def test_read_properties_missing_file(tmp_path):
    assert read_properties(tmp_path / 'nope.properties') == {}


def test_resolve_defaults():
    assert resolve_target(env={}) == (DEFAULT_HOST, DEFAULT_PORT, '')


def test_resolve_env():
    env = {'RCON_HOST': 'game.example', 'RCON_PORT': '28016', 'RCON_PASSWORD': 'pw'}
    assert resolve_target(env=env) == ('game.example', 28016, 'pw')


def test_resolve_properties_beat_env_and_args_beat_properties(tmp_path):
    path = tmp_path / 'server.properties'
    path.write_text('server-ip=10.0.0.5\nrcon.port=25575\nrcon.password=fromfile\n', encoding='utf-8')
    env = {'RCON_HOST': 'envhost', 'RCON_PORT': '1', 'RCON_PASSWORD': 'envpw'}
    assert resolve_target(properties=path, env=env) == ('10.0.0.5', 25575, 'fromfile')
    assert resolve_target('cli', 9, 'clipw', properties=path, env=env) == ('cli', 9, 'clipw')


def test_resolve_bad_port():
    with pytest.raises(ValueError):
        resolve_target(env={'RCON_PORT': 'abc'})


def test_resolve_missing_properties_file(tmp_path):
    with pytest.raises(ValueError, match='not found'):
        resolve_target(properties=tmp_path / 'typo.properties', env={})

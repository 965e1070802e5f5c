
import os

from traitlets import Unicode, Enum, Bool, List, HasTraits
from traitlets.config.loader import JSONFileConfigLoader, ConfigFileNotFound


CONFIG_FILENAME = 'bundlediff_config.json'


class BundleDiffConfigurable(HasTraits):

    def configured_traits(self, cls):
        "Current values of the config traits declared on cls itself."
        return {name: getattr(self, name)
                for name in cls.class_own_traits(config=True)}


_defaults = {}

def config_instance(cls):
    "Shared default instance of a configurable."
    if cls not in _defaults:
        _defaults[cls] = cls()
    return _defaults[cls]


def config_paths():
    """Directories searched for config files, highest priority first."""
    paths = [os.getcwd()]
    env_dir = os.environ.get('BUNDLEDIFF_CONFIG_DIR')
    if env_dir:
        paths.append(env_dir)
    paths.append(os.path.join(os.path.expanduser('~'), '.bundlediff'))
    return paths


def _load_config_files(filename, paths):
    """Yield the config found in each directory, lowest priority first."""
    for path in reversed(paths):
        try:
            config = JSONFileConfigLoader(filename, path=path).load_config()
        except ConfigFileNotFound:
            continue
        if config:
            yield config


def recursive_update(target, new, include_none):
    """Merge new into target, section by section.

    Unless include_none is set, None values remove their key
    and sections left empty are dropped.
    """
    for key, value in new.items():
        if isinstance(value, dict):
            section = target.setdefault(key, {})
            recursive_update(section, value, include_none)
            if not section and not include_none:
                del target[key]
        elif value is None and not include_none:
            target.pop(key, None)
        else:
            target[key] = value


def build_config(entrypoint, include_none=False):
    """Effective config of an entrypoint: trait defaults, then config files.

    Sections are applied from the most generic configurable class to
    the entrypoint's own, so a file section for a subclass wins.
    """
    if entrypoint not in entrypoint_configurables:
        raise ValueError('No config defined for entrypoint %r, expected one of %s' % (
            entrypoint, ', '.join(sorted(entrypoint_configurables))))

    from_files = {}
    for c in _load_config_files(CONFIG_FILENAME, config_paths()):
        recursive_update(from_files, c, include_none)

    config = {}
    for cls in reversed(entrypoint_configurables[entrypoint].mro()):
        if not issubclass(cls, BundleDiffConfigurable):
            continue
        recursive_update(config, config_instance(cls).configured_traits(cls), include_none)
        recursive_update(config, from_files.get(cls.__name__, {}), include_none)

    return config


class Global(BundleDiffConfigurable):

    log_level = Enum(
        ('DEBUG', 'INFO', 'WARN', 'ERROR', 'CRITICAL'),
        'INFO',
        help="Log level name.",
    ).tag(config=True)


class Show(Global):

    use_color = Bool(
        True,
        help="Use ANSI color escapes in terminal output.",
    ).tag(config=True)


class Diff(Global):

    atomic_paths = List(
        Unicode(),
        default_value=[],
        help="Paths (like /Params/*/Curve) whose values are replaced "
             "whole instead of being diffed.",
    ).tag(config=True)


class BDiff(Diff, Show):
    pass


class BPatch(Global):

    schema = Unicode(
        None,
        allow_none=True,
        help="Class schema (json) for patching typed instances.",
    ).tag(config=True)


class BShow(Show):
    pass


entrypoint_configurables = {
    'bdiff': BDiff,
    'bpatch': BPatch,
    'bshow': BShow,
}

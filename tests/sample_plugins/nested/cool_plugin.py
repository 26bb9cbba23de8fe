"""Nested plugin used to ensure recursive discovery works."""

from dataclasses import dataclass, field


@dataclass
class CoolPlugin:
    name: str = "cool_nested"
    diagnostics: list = field(default_factory=list)

    def on_registry_diagnostic(self, error):
        self.diagnostics.append(error)
        return "cool"


def setup_plugin(manager, exposed):
    plugin = CoolPlugin()
    manager.expose("cool_plugin", plugin)
    return plugin

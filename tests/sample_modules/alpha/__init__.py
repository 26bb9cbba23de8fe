"""Module declaring a sprite source with its controller."""

from animlib.capabilities import AnimationController, AnimationSource, Frame, Module, Track


class AlphaSource(AnimationSource):
    tracks = {"Idle": Track((Frame(0, 0.2), Frame(1, 0.2)))}
    sprite_size = (16, 16)


class AlphaController(AnimationController):
    pass


animlib_module = Module("alpha", (AlphaSource, AlphaController))

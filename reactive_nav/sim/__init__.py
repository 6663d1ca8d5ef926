from .scenes import RandomSceneConfig, Scene, load_scene, random_scene, scene_from_dict

__all__ = ["Scene", "RandomSceneConfig", "scene_from_dict", "load_scene", "random_scene"]

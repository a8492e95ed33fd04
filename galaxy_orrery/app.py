import logging
import time

import moderngl
import pygame

from .logging_config import setup_logging
from .renderer import SceneRenderer
from .scene import build_scene
from .settings import MOUSE_SENSITIVITY, PAN_SPEED, ZOOM_SPEED, AppConfig, parse_args

logger = logging.getLogger(__name__)

LEFT_BUTTON, RIGHT_BUTTON = 1, 3


def handle_event(event, scene, renderer):
    """Apply one pygame event to the scene. Returns False when the app should quit."""
    if event.type == pygame.QUIT:
        return False
    if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
        return False
    if event.type == pygame.MOUSEMOTION:
        dx, dy = event.rel
        if event.buttons[0]:
            scene.camera.rotate(dx * MOUSE_SENSITIVITY, dy * MOUSE_SENSITIVITY)
        elif event.buttons[2]:
            scene.camera.pan(dx * PAN_SPEED, dy * PAN_SPEED)
    elif event.type == pygame.MOUSEWHEEL:
        scene.camera.zoom(event.y * ZOOM_SPEED)
    elif event.type == pygame.VIDEORESIZE:
        scene.resize(event.w, event.h)
        renderer.resize(event.w, event.h)
        logger.debug("Viewport resized to %dx%d", event.w, event.h)
    return True


def run(config: AppConfig) -> None:
    pygame.init()
    try:
        pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MAJOR_VERSION, 3)
        pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MINOR_VERSION, 3)
        pygame.display.gl_set_attribute(pygame.GL_CONTEXT_PROFILE_MASK, pygame.GL_CONTEXT_PROFILE_CORE)
        pygame.display.set_mode((config.width, config.height),
                                pygame.OPENGL | pygame.DOUBLEBUF | pygame.RESIZABLE)
        pygame.display.set_caption("Galaxy Orrery")
        ctx = moderngl.create_context()

        scene = build_scene(config)
        renderer = SceneRenderer(ctx, scene, config.assets)
        renderer.resize(config.width, config.height)

        clock = pygame.time.Clock()
        start = time.perf_counter()
        running = True
        while running:
            clock.tick(60)
            for event in pygame.event.get():
                if not handle_event(event, scene, renderer):
                    running = False
            scene.tick(time.perf_counter() - start)
            renderer.render(scene)
            pygame.display.flip()
        logger.info("Stopped after %.1f s (%.1f fps at exit)", scene.animator.elapsed, clock.get_fps())
    except Exception:
        logger.exception("Render loop crashed")
        raise
    finally:
        pygame.quit()


def main(argv=None) -> int:
    config = parse_args(argv)
    setup_logging(config.log_level, config.log_file)
    try:
        run(config)
    except Exception:
        return 1
    return 0

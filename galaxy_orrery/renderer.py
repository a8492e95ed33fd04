import logging
import os

import moderngl
import numpy as np
import pygame
from pyrr import Matrix44

from .settings import (ORBIT_LINE_COLOR, ORBIT_LINE_OPACITY, POINT_SCALE, SPHERE_SLICES,
                       SPHERE_STACKS)
from .sprite import star_sprite

logger = logging.getLogger(__name__)

TEXTURE_EXTENSIONS = (".jpg", ".png", ".jpeg")


# --- HELPERS ---
def safe_uniform(prog, name, value):
    if name not in prog: return
    if isinstance(value, (bool, int, float)):
        prog[name].value = value
    else:
        val_np = np.array(value, dtype='f4')
        if val_np.ndim == 1 and val_np.size <= 4:
            prog[name].value = tuple(val_np)
        else:
            prog[name].write(val_np.tobytes())


# --- SHADERS ---
GALAXY_VS = """
#version 330
in vec3 in_position; in vec3 in_color; in float in_size;
uniform mat4 m_proj; uniform mat4 m_view; uniform float point_scale; uniform float half_height;
out vec3 v_color;
void main() {
    vec4 view_pos = m_view * vec4(in_position, 1.0);
    gl_Position = m_proj * view_pos;
    gl_PointSize = max(in_size * point_scale * half_height / max(-view_pos.z, 0.001), 1.0);
    v_color = in_color;
}
"""
GALAXY_FS = """
#version 330
in vec3 v_color; uniform sampler2D sprite; out vec4 f_color;
void main() {
    vec4 tex = texture(sprite, gl_PointCoord);
    if (tex.a < 0.01) discard;
    f_color = vec4(v_color * tex.rgb, tex.a);
}
"""

PLANET_VS = """
#version 330
in vec3 in_position; in vec2 in_uv;
uniform mat4 m_proj; uniform mat4 m_view; uniform mat4 m_model;
out vec2 v_uv;
void main() {
    gl_Position = m_proj * m_view * m_model * vec4(in_position, 1.0);
    v_uv = in_uv;
}
"""
PLANET_FS = """
#version 330
in vec2 v_uv; uniform sampler2D tex; out vec4 f_color;
void main() { f_color = vec4(texture(tex, v_uv).rgb, 1.0); }
"""

LINE_VS = "#version 330\nin vec3 in_position; uniform mat4 m_proj; uniform mat4 m_view; void main() { gl_Position = m_proj * m_view * vec4(in_position, 1.0); }"
LINE_FS = "#version 330\nuniform vec4 color; out vec4 f_color; void main() { f_color = color; }"


# --- GEOMETRY ---
def generate_sphere(radius=1.0, stacks=SPHERE_STACKS, slices=SPHERE_SLICES):
    """UV sphere as interleaved ``3f 2f`` vertices plus triangle indices."""
    vertices = []; indices = []
    for i in range(stacks + 1):
        lat = np.pi * i / stacks; sin_lat = np.sin(lat); cos_lat = np.cos(lat)
        for j in range(slices + 1):
            lon = 2 * np.pi * j / slices
            x = np.cos(lon) * sin_lat; y = cos_lat; z = np.sin(lon) * sin_lat
            u = 1 - (j / slices); v = 1 - (i / stacks)
            vertices.extend([x * radius, y * radius, z * radius, u, v])
    for i in range(stacks):
        for j in range(slices):
            first = (i * (slices + 1)) + j; second = first + slices + 1
            indices.extend([first, second, first + 1, second, second + 1, first + 1])
    return np.array(vertices, dtype='f4'), np.array(indices, dtype='i4')


# --- TEXTURES ---
class TextureManager:
    def __init__(self, ctx, img_dir):
        self.ctx = ctx
        self.img_dir = img_dir
        self.textures = {}
        if not os.path.isdir(self.img_dir):
            logger.warning("Texture folder '%s' not found, using plain colours", self.img_dir)

    def _upload(self, surf):
        data = pygame.image.tobytes(pygame.transform.flip(surf, False, True), 'RGBA', False)
        tex = self.ctx.texture(surf.get_size(), 4, data)
        tex.build_mipmaps()
        tex.filter = (moderngl.LINEAR_MIPMAP_LINEAR, moderngl.LINEAR)
        return tex

    def get_texture(self, name, fallback_color):
        if name in self.textures: return self.textures[name]
        tex = None
        for n in [name, name.lower(), name.capitalize()]:
            for ext in TEXTURE_EXTENSIONS:
                full_path = os.path.join(self.img_dir, n + ext)
                if not os.path.exists(full_path): continue
                try:
                    tex = self._upload(pygame.image.load(full_path).convert_alpha())
                except pygame.error as e:
                    logger.warning("Failed to load %s: %s", full_path, e)
                    continue
                logger.debug("Loaded texture %s", full_path)
                break
            if tex is not None: break
        if tex is None:
            tex = self.generate_procedural(fallback_color)
        self.textures[name] = tex
        return tex

    def generate_procedural(self, color):
        surf = pygame.Surface((4, 4), pygame.SRCALPHA)
        surf.fill(tuple(int(c * 255) for c in color) + (255,))
        return self._upload(surf)

    def sprite_texture(self):
        image = star_sprite()
        tex = self.ctx.texture(image.shape[1::-1], 4, image.tobytes())
        tex.filter = (moderngl.LINEAR, moderngl.LINEAR)
        return tex


# --- RENDERER ---
class SceneRenderer:
    """Uploads a :class:`~galaxy_orrery.scene.Scene` once and draws it every frame."""

    def __init__(self, ctx, scene, assets_dir):
        self.ctx = ctx
        self.height = 1
        self.prog_galaxy = ctx.program(vertex_shader=GALAXY_VS, fragment_shader=GALAXY_FS)
        self.prog_planet = ctx.program(vertex_shader=PLANET_VS, fragment_shader=PLANET_FS)
        self.prog_line = ctx.program(vertex_shader=LINE_VS, fragment_shader=LINE_FS)
        self.tex_man = TextureManager(ctx, assets_dir)

        self.vbo_galaxy = ctx.buffer(scene.galaxy.interleaved())
        self.vao_galaxy = ctx.vertex_array(
            self.prog_galaxy, [(self.vbo_galaxy, '3f 3f 1f', 'in_position', 'in_color', 'in_size')])
        self.sprite = self.tex_man.sprite_texture()

        sphere_vbo, sphere_ibo = generate_sphere(1.0)
        self.vbo_sphere = ctx.buffer(sphere_vbo); self.ibo_sphere = ctx.buffer(sphere_ibo)
        self.vao_sphere = ctx.vertex_array(
            self.prog_planet, [(self.vbo_sphere, '3f 2f', 'in_position', 'in_uv')], self.ibo_sphere)

        self.orbit_vaos = []
        for pts in scene.orbit_paths:
            vbo = ctx.buffer(np.ascontiguousarray(pts, dtype='f4'))
            self.orbit_vaos.append(ctx.vertex_array(self.prog_line, [(vbo, '3f', 'in_position')]))

        for spec, _ in scene.planets:
            self.tex_man.get_texture(spec.texture, spec.color)
        logger.info("Uploaded %d points, %d orbit paths", scene.galaxy.count, len(self.orbit_vaos))

    def resize(self, width, height):
        self.height = max(height, 1)
        self.ctx.viewport = (0, 0, width, height)

    def render(self, scene):
        ctx = self.ctx
        ctx.clear(0.0, 0.0, 0.0)
        m_proj = scene.camera.projection_matrix()
        m_view = scene.camera.view_matrix()

        # Planets
        ctx.enable(moderngl.DEPTH_TEST | moderngl.CULL_FACE)
        ctx.depth_mask = True
        safe_uniform(self.prog_planet, 'm_proj', m_proj); safe_uniform(self.prog_planet, 'm_view', m_view)
        for spec, handle in scene.planets:
            transform = scene.animator.transform(handle)
            model = (Matrix44.from_translation(transform.position)
                     * Matrix44.from_y_rotation(transform.rotation)
                     * Matrix44.from_scale([spec.radius] * 3))
            safe_uniform(self.prog_planet, 'm_model', model)
            self.tex_man.get_texture(spec.texture, spec.color).use(0)
            safe_uniform(self.prog_planet, 'tex', 0)
            self.vao_sphere.render()
        ctx.disable(moderngl.CULL_FACE)

        # Orbits
        ctx.enable(moderngl.BLEND)
        ctx.blend_func = moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA
        safe_uniform(self.prog_line, 'm_proj', m_proj); safe_uniform(self.prog_line, 'm_view', m_view)
        safe_uniform(self.prog_line, 'color', ORBIT_LINE_COLOR + (ORBIT_LINE_OPACITY,))
        for vao in self.orbit_vaos: vao.render(mode=moderngl.LINE_STRIP)

        # Galaxy: additive, no depth writes
        ctx.enable(moderngl.PROGRAM_POINT_SIZE)
        ctx.depth_mask = False
        ctx.blend_func = moderngl.SRC_ALPHA, moderngl.ONE
        safe_uniform(self.prog_galaxy, 'm_proj', m_proj); safe_uniform(self.prog_galaxy, 'm_view', m_view)
        safe_uniform(self.prog_galaxy, 'point_scale', POINT_SCALE)
        safe_uniform(self.prog_galaxy, 'half_height', self.height / 2.0)
        self.sprite.use(0); safe_uniform(self.prog_galaxy, 'sprite', 0)
        self.vao_galaxy.render(mode=moderngl.POINTS)
        ctx.depth_mask = True
        ctx.disable(moderngl.BLEND)

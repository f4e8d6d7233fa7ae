# どこで: `src/easel/interactive/gl/programs.py`。
# 何を: 組み込み描画（単色塗り / ライティング付き）に使う GLSL ソースを定義する。
# なぜ: renderer からシェーダ文字列を切り離し、描画ロジックを読みやすく保つため。

from __future__ import annotations

MAX_DIRECTIONAL_LIGHTS = 8

FLAT_VERTEX_SHADER = """
#version 410
uniform mat4 view_projection;
in vec3 in_vert;
void main() {
    gl_Position = view_projection * vec4(in_vert, 1.0);
}
"""

FLAT_FRAGMENT_SHADER = """
#version 410
uniform vec4 color;
out vec4 frag_color;
void main() {
    frag_color = color;
}
"""

LIT_VERTEX_SHADER = """
#version 410
uniform mat4 view_projection;
in vec3 in_vert;
in vec3 in_normal;
out vec3 v_position;
out vec3 v_normal;
void main() {
    v_position = in_vert;
    v_normal = in_normal;
    gl_Position = view_projection * vec4(in_vert, 1.0);
}
"""

LIT_FRAGMENT_SHADER = f"""
#version 410
#define MAX_DIRECTIONAL_LIGHTS {MAX_DIRECTIONAL_LIGHTS}
uniform vec3 ambient_light;
uniform int directional_count;
uniform vec3 light_directions[MAX_DIRECTIONAL_LIGHTS];
uniform vec3 light_colors[MAX_DIRECTIONAL_LIGHTS];
uniform vec4 fill_color;
uniform vec3 ambient_material;
uniform vec3 specular_material;
uniform float use_specular;
uniform float shininess;
uniform vec3 camera_position;
in vec3 v_position;
in vec3 v_normal;
out vec4 frag_color;
void main() {{
    vec3 n = normalize(v_normal);
    vec3 to_eye = normalize(camera_position - v_position);
    vec3 diffuse = vec3(0.0);
    vec3 specular = vec3(0.0);
    for (int i = 0; i < directional_count; i++) {{
        vec3 to_light = -normalize(light_directions[i]);
        float lambert = max(dot(n, to_light), 0.0);
        diffuse += light_colors[i] * lambert;
        vec3 h = normalize(to_light + to_eye);
        specular += light_colors[i] * pow(max(dot(n, h), 0.0), shininess) * (lambert > 0.0 ? 1.0 : 0.0);
    }}
    vec3 rgb = ambient_light * ambient_material
        + diffuse * fill_color.rgb
        + use_specular * specular * specular_material;
    frag_color = vec4(min(rgb, vec3(1.0)), fill_color.a);
}}
"""

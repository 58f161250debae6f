SPHERES_VERT = r"""
#version 330 core
layout(location=0) in vec3 inPos;
layout(location=1) in vec3 inColor;
layout(location=2) in float inRadius;
layout(location=3) in float inAlpha;
uniform mat4 uVP;
uniform float uViewportH;
uniform float uProjScale;
out vec3 vColor;
out float vAlpha;
void main() {
    vec4 clip = uVP * vec4(inPos, 1.0);
    gl_Position = clip;
    vColor = inColor;
    vAlpha = inAlpha;
    // world radius -> pixel diameter at this depth
    gl_PointSize = max(2.0, 2.0 * inRadius * uProjScale * uViewportH * 0.5 / max(clip.w, 1e-3));
}
"""

SPHERES_FRAG = r"""
#version 330 core
in vec3 vColor;
in float vAlpha;
out vec4 FragColor;
uniform float uAmbient;
uniform vec3 uLightDir;
void main() {
    vec2 p = gl_PointCoord * 2.0 - 1.0;
    float r2 = dot(p, p);
    if (r2 > 1.0) discard;
    vec3 n = vec3(p.x, -p.y, sqrt(1.0 - r2));
    float diffuse = max(dot(n, normalize(uLightDir)), 0.0);
    vec3 c = vColor * (uAmbient + (1.0 - uAmbient) * diffuse);
    FragColor = vec4(c, vAlpha);
}
"""

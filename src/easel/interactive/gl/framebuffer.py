# どこで: `src/easel/interactive/gl/framebuffer.py`。
# 何を: 色テクスチャと深度テクスチャを持つオフスクリーン描画先を確保・解放する。
# なぜ: 深度をシェーダからサンプルできる形（比較無しの depth texture）で持つ設定を 1 箇所にまとめるため。

from __future__ import annotations

import moderngl


class GLFramebuffer:
    """色 + 深度テクスチャ付きの Framebuffer。

    Notes
    -----
    width/height は Canvas の論理寸法。テクスチャは pixel_ratio 倍で確保する。
    """

    def __init__(
        self,
        ctx: moderngl.Context,
        width: int,
        height: int,
        *,
        pixel_ratio: float = 1.0,
    ) -> None:
        self.width = int(width)
        self.height = int(height)
        size = (
            max(1, int(round(self.width * float(pixel_ratio)))),
            max(1, int(round(self.height * float(pixel_ratio)))),
        )
        self.size = size

        self._color = ctx.texture(size, 4)
        self._color.filter = (moderngl.LINEAR, moderngl.LINEAR)
        self._color.repeat_x = False
        self._color.repeat_y = False

        self._depth = ctx.depth_texture(size)
        # 深度比較を無効化し、sampler2D から生の深度値を読めるようにする。
        self._depth.compare_func = ""
        self._depth.filter = (moderngl.NEAREST, moderngl.NEAREST)
        self._depth.repeat_x = False
        self._depth.repeat_y = False

        self.fbo = ctx.framebuffer(color_attachments=[self._color], depth_attachment=self._depth)

    @property
    def color(self) -> moderngl.Texture:
        return self._color

    @property
    def depth(self) -> moderngl.Texture:
        return self._depth

    def use(self) -> None:
        self.fbo.use()

    def release(self) -> None:
        self.fbo.release()
        self._color.release()
        self._depth.release()


__all__ = ["GLFramebuffer"]

from collections import namedtuple

Rect = namedtuple("Rect", "y x h w")

NAV_W = 20
URL_BAR_H = 3
STATUS_H = 1


class ScreenLayout:
    """Splits the terminal into the regions the renderer paints.

    nav | url bar (method, url, [Go], [+])
        | headers | body
        | response
    status line across the bottom
    """

    def __init__(self, height, width):
        self.resize(height, width)

    def resize(self, height, width):
        self.H = max(1, height)
        self.W = max(1, width)

        body_h = max(1, self.H - STATUS_H)
        nav_w = min(NAV_W, max(1, self.W // 4))
        main_x = nav_w
        main_w = max(1, self.W - nav_w)

        self.nav = Rect(0, 0, body_h, nav_w)
        self.main = Rect(0, main_x, body_h, main_w)
        self.status = Rect(self.H - STATUS_H, 0, STATUS_H, self.W)

        request_h = max(URL_BAR_H + 3, (body_h * 2) // 5)
        request_h = min(request_h, body_h)
        self.url_bar = Rect(0, main_x, min(URL_BAR_H, request_h), main_w)

        sections_y = self.url_bar.h
        sections_h = max(0, request_h - sections_y)
        headers_w = main_w // 2
        self.headers = Rect(sections_y, main_x, sections_h, headers_w)
        self.body = Rect(sections_y, main_x + headers_w, sections_h, main_w - headers_w)

        self.response = Rect(request_h, main_x, max(0, body_h - request_h), main_w)

    def centered(self, height, width, within=None):
        area = within or self.main
        h = max(1, min(height, area.h))
        w = max(1, min(width, area.w))
        y = area.y + max(0, (area.h - h) // 2)
        x = area.x + max(0, (area.w - w) // 2)
        return Rect(y, x, h, w)

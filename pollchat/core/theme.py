CLR = {
    "bg":          (250, 250, 252),
    "sidebar":     (243, 244, 248),
    "sidebar_sel": (226, 232, 255),
    "panel":       (236, 238, 244),
    "surface_alt": (255, 255, 255),
    "border":      (220, 222, 230),
    "text":        (31, 41, 55),
    "muted":       (107, 114, 128),
    "accent":      (209, 213, 225),
    "primary":     (59, 130, 246),
    "primary_fg":  (255, 255, 255),
    "bubble_rx":   (243, 244, 246),
    "danger":      (239, 68, 68),
    "overlay_dim": (0, 0, 0, 110),
}

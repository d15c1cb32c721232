import asyncio
import logging
import pygame as pg
import pygame_gui

from pollchat.engine import SyncEngine
from pollchat.core.theme import CLR
from pollchat.core.layout import init_window, compute_layout
from pollchat.components.sidebar import Sidebar
from pollchat.components.header import ChatHeader
from pollchat.components.messages import MessagesView
from pollchat.components.input_bar import InputBar
from pollchat.components.add_contact import AddContactOverlay
from pollchat.components.auth_form import AuthForm
from pollchat.components.notice_popup import NoticePopup

FPS = 60


def _spawn(tasks: set, coro, name: str):
    # referencia fuerte hasta que termine; los fallos quedan en el log
    t = asyncio.get_running_loop().create_task(coro, name=name)
    tasks.add(t)

    def _done(fut):
        tasks.discard(fut)
        if not fut.cancelled() and fut.exception() is not None:
            logging.error("[UI] %s falló: %r", name, fut.exception())
    t.add_done_callback(_done)
    return t


async def run(engine: SyncEngine):
    """
    Bucle principal. Corre en el mismo event loop que los pollers: cada frame
    cede el control con asyncio.sleep.
    """
    pg.init()
    pg.key.start_text_input()
    screen = init_window()
    clock = pg.time.Clock()

    manager = pygame_gui.UIManager(screen.get_size())
    store = engine.store
    conversation = engine.conversation
    directory = engine.directory

    sidebar = Sidebar()
    header = ChatHeader()
    messages = MessagesView()
    inputbar = InputBar(conversation)
    overlay = AddContactOverlay(manager, directory)
    auth_form = AuthForm(manager)
    popup = NoticePopup(manager, engine.notices)

    conversation.on_scroll = messages.scroll_to_newest
    tasks: set = set()

    running = True
    while running:
        dt = clock.tick()
        time_delta = dt / 1000.0
        w, h = screen.get_size()
        L = compute_layout(w, h)
        logged_in = store.user is not None

        if logged_in:
            auth_form.kill()
            overlay.sync(L)
        else:
            if directory.overlay_visible:
                directory.close_overlay()
            overlay.sync(L)
            auth_form.show((w, h))

        # input
        for e in pg.event.get():
            if e.type == pg.QUIT:
                running = False
                break
            if e.type == pg.KEYDOWN and e.key == pg.K_q and (pg.key.get_mods() & pg.KMOD_CTRL):
                running = False
                break
            if e.type in (pg.VIDEORESIZE, pg.WINDOWSIZECHANGED):
                manager.set_window_resolution(screen.get_size())

            manager.process_events(e)
            if popup.is_open:
                continue

            if not logged_in:
                res = auth_form.handle_event(e)
                if res:
                    kind, values = res
                    if kind == "login":
                        _spawn(tasks, engine.auth.login(values["email"], values["password"]), "login")
                    else:
                        _spawn(tasks, engine.auth.register(
                            values["email"], values["password"], values["firstname"],
                            values["lastname"], values.get("descr", ""),
                        ), "register")
                continue

            if directory.overlay_visible:
                res = overlay.handle_event(e)
                if res:
                    kind, user_id = res
                    if kind == "close":
                        directory.close_overlay()
                    elif kind == "add":
                        _spawn(tasks, directory.pick_result(user_id), f"add_contact:{user_id}")
                continue

            if header.handle_event(e) == "logout":
                engine.auth.logout()
                messages.scroll = 0
                continue

            res = sidebar.handle_event(e, L, directory.contact_rows)
            if res:
                kind, user_id = res
                if kind == "add":
                    directory.open_overlay()
                elif kind == "select":
                    directory.pick_contact(user_id)
                continue

            messages.handle_event(e, L)
            if inputbar.handle_event(e) == "send":
                conversation.submit()

        # - RENDER -
        screen.fill(CLR["bg"])
        if logged_in:
            sidebar.draw(screen, L, directory.contact_rows)
            user = store.user
            header.draw(screen, L, conversation.title, conversation.subtitle,
                        user.display_name if user else "")
            placeholder = "" if conversation.has_selection else "Select a contact to start chatting"
            messages.draw(screen, L, conversation.rows, placeholder)
            inputbar.draw(screen, L, enabled=conversation.has_selection)
            overlay.draw(screen, L)
        else:
            auth_form.draw(screen, L)

        popup.update()
        manager.update(time_delta)
        manager.draw_ui(screen)
        pg.display.flip()

        # ceder al event loop: pollers y respuestas HTTP avanzan aquí
        await asyncio.sleep(1 / FPS)

    for t in list(tasks):
        t.cancel()
    pg.quit()

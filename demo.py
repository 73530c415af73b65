"""
Watch the singing ball.
Run: python demo.py [--window-height 960]
SPACE play/pause, R reset, UP/DOWN pick a slider, LEFT/RIGHT tune it, Q or close window to exit.
"""
import argparse
import logging

import pygame

import singing_ball as SB
from singing_ball.controls import ControlPanel
from singing_ball.engine import SimulationConfig, SimulationEngine
from singing_ball.renderer import PygameCanvas, draw_lines, scale_to_height
from singing_ball.scheduler import RealtimeScheduler


def non_negative_int(text):
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Singing ball demo')
    parser.add_argument('--width', type=int, default=SB.WIDTH)
    parser.add_argument('--height', type=int, default=SB.HEIGHT)
    parser.add_argument('--window-height', type=int, default=960)
    parser.add_argument('--fps', type=int, default=SB.FPS)
    parser.add_argument('--max-collision-points', type=non_negative_int, default=SB.MAX_COLLISION_POINTS)
    parser.add_argument('--verbose', action='store_true')
    return parser.parse_args(argv)


def main():
    args = parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s %(name)s %(levelname)s %(message)s')

    pygame.init()
    canvas = PygameCanvas(args.width, args.height)
    scheduler = RealtimeScheduler()
    engine = SimulationEngine(
        canvas, scheduler,
        SimulationConfig(max_collision_points=args.max_collision_points))
    panel = ControlPanel(engine)

    window_height = min(args.window_height, args.height)
    preview = scale_to_height(canvas.surface, window_height)
    screen = pygame.display.set_mode(preview.get_size())
    pygame.display.set_caption('Singing Ball')
    clock = pygame.time.Clock()

    # Mount
    engine.render()
    engine.start()

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_q, pygame.K_ESCAPE):
                    running = False
                else:
                    panel.handle_key(event.key)

        scheduler.run_frame()

        screen.blit(scale_to_height(canvas.surface, window_height), (0, 0))
        draw_lines(screen, panel.lines())
        pygame.display.flip()
        clock.tick(args.fps)

    # Unmount
    engine.stop()
    state = engine.state
    print(f"Collisions: {state.collision_count}")
    print(f"Final radius: {state.radius:.2f} | Mass: {engine.mass:.2f} | Time: {state.elapsed_time:.1f}s")
    pygame.quit()


if __name__ == '__main__':
    main()

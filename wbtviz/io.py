from termcolor import colored

RULE = "-" * 72


def header():
    print("{:^8} | {:^10} | {:^8} | {:^8} | {:^10} | {:^10}".format(
        "Steps", "Frame", "Base", "Axes", "Contacts", "Contact"))
    print(colored(RULE))


def pass_summary(trajectory, base_style, n_annotations, contact_style, n_slots):
    """Print one row describing a processed trajectory."""
    print("{:^8} | {:^10} | {:^8} | {:^8} | {:^10} | {:^10}".format(
        len(trajectory),
        trajectory.frame_id[:10],
        base_style.value,
        n_annotations,
        n_slots,
        contact_style.value,
    ))


def empty_notice(reason):
    print(colored(f"Nothing to draw: {reason}", "yellow"))

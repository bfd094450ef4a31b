from lighthouse.bot import Bot


def test_bots_collapse_in_a_set():
    bots = {Bot(), Bot()}
    assert len(bots) == 1
    assert Bot() in bots
"""Sample SoulScript programs

Each program is plain source text as a host would store it. They double as
fixtures for tests and as the ``--example`` programs of the command line.
"""

# Decays by its charge every tick and destroys itself once drained
ATOM = """
component Atom {
    float energy = 100;
    float charge = -1;

    fn update(float dt) {
        energy += charge * dt;
        if energy < 0 {
            destroy();
        }
    }
}
"""

# Spawns sparks on an interval and hears about every destroyed entity
SPAWNER = """
component Spawner {
    float timer = 0;
    float interval = 2;
    int spawned = 0;

    fn init(vec2 position) {
        subscribe("entityDestroyed", "onEntityDestroyed");
        log("Spawner ready at " + position);
    }

    fn update(float dt) {
        timer += dt;
        if timer >= interval {
            timer = 0;
            createEntity("spark", randomVec2(100, 700, 100, 500));
            spawned += 1;
        }
    }

    fn onEntityDestroyed(map info) {
        log("Entity gone: " + info);
    }
}
"""

# Pinger subscribes; Listener and Echo only define the handler
PINGER = """
component Pinger {
    float elapsed = 0;

    fn init(vec2 position) {
        subscribe("ping", "onPing");
    }

    fn update(float dt) {
        elapsed += dt;
        if elapsed >= 1 {
            elapsed = 0;
            broadcast("ping", getTime());
        }
    }
}

component Listener {
    int heard = 0;
    float last = 0;

    fn onPing(float time) {
        heard += 1;
        last = time;
    }
}

component Echo {
    int heard = 0;

    fn onPing(float time) {
        heard += 1;
        log("Echo heard ping at " + time);
    }
}
"""

# Drifts around its spawn point, glowing, and blinks on a timer
FIREFLY = """
component Firefly {
    float phase = 0;
    float glow = 0;
    vec2 home;

    fn init(vec2 position) {
        home = position;
        phase = random() * 6.28;
        scheduleCallback(3, "blink", 1);
    }

    fn update(float dt) {
        phase += dt * 2;
        glow = (sin(phase) + 1) / 2;
        setOpacity(glow);
        setPosition(home + vec2(cos(phase) * 20, sin(phase) * 10));
        if glow > 0.95 {
            setSpriteFrame(1, 0);
        }
        if glow < 0.05 {
            setSpriteFrame(0, 0);
        }
    }

    fn blink(float times) {
        log("Firefly blink " + times);
        playSound("chime", 0.5);
        scheduleCallback(3, "blink", times + 1);
    }
}
"""

EXAMPLES = {
    'atom': ATOM,
    'spawner': SPAWNER,
    'pinger': PINGER,
    'firefly': FIREFLY,
}

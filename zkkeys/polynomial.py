"""FR 위의 다항식 헬퍼.

다항식은 최저차항부터의 계수 리스트이다. QAP 도메인은 R1CS → QAP 변환
예제와 같이 점 1..n 이다.
"""

from zkkeys.field import FR


def _trim(poly):
    while len(poly) > 1 and poly[-1] == 0:
        poly.pop()
    return poly


# Multiply two polynomials
def multiply_polys(a, b):
    o = [FR(0)] * (len(a) + len(b) - 1)
    for i, ai in enumerate(a):
        if ai == 0:
            continue
        for j, bj in enumerate(b):
            o[i + j] = o[i + j] + ai * bj
    return o


# Add two polynomials
def add_polys(a, b, subtract=False):
    o = [FR(0)] * max(len(a), len(b))
    for i, ai in enumerate(a):
        o[i] = o[i] + ai
    for i, bi in enumerate(b):
        o[i] = o[i] - bi if subtract else o[i] + bi
    return o


def subtract_polys(a, b):
    return add_polys(a, b, subtract=True)


# Divide a/b, return quotient and remainder
def divide_polys(a, b):
    b = _trim(list(b))
    if len(b) == 1 and b[0] == 0:
        raise ZeroDivisionError("polynomial division by zero")
    remainder = _trim(list(a))
    if len(remainder) < len(b):
        return [FR(0)], remainder
    o = [FR(0)] * (len(remainder) - len(b) + 1)
    lead_inv = FR(1) / b[-1]
    for pos in range(len(o) - 1, -1, -1):
        factor = remainder[pos + len(b) - 1] * lead_inv
        o[pos] = factor
        if factor == 0:
            continue
        for j, bj in enumerate(b):
            remainder[pos + j] = remainder[pos + j] - factor * bj
    remainder = _trim(remainder[:len(b) - 1] or [FR(0)])
    return o, remainder


# Evaluate a polynomial at a point
def evaluate_poly(poly, x):
    acc = FR(0)
    for c in reversed(poly):
        acc = acc * x + c
    return acc


def vanishing_poly(n):
    """Z(X) = (X - 1)(X - 2)...(X - n)."""
    z = [FR(1)]
    for k in range(1, n + 1):
        z = multiply_polys(z, [FR(-k), FR(1)])
    return z


def vanishing_at(x, n):
    acc = FR(1)
    for k in range(1, n + 1):
        acc = acc * (x - k)
    return acc


def _lagrange_denominators(n):
    # w_j = prod_{k != j} (j - k) = (-1)^(n-j) (j-1)! (n-j)!
    fact = [FR(1)]
    for k in range(1, n + 1):
        fact.append(fact[-1] * k)
    dens = []
    for j in range(1, n + 1):
        w = fact[j - 1] * fact[n - j]
        dens.append(-w if (n - j) % 2 else w)
    return dens


def lagrange_at(x, n):
    """[L_1(x), ..., L_n(x)] for the domain 1..n; x must lie outside it."""
    z = vanishing_at(x, n)
    return [z / ((x - j) * w) for j, w in zip(range(1, n + 1), _lagrange_denominators(n))]


def interpolate_many(columns, n):
    """Interpolate several evaluation vectors over 1..n at once.

    Each column lists the values at the points 1..n. The quotient Z(X)/(X - j)
    is computed once per point and shared by every column.
    """
    z = vanishing_poly(n)
    dens = _lagrange_denominators(n)
    results = [[FR(0)] * n for _ in columns]
    for j in range(1, n + 1):
        scales = [col[j - 1] / dens[j - 1] for col in columns]
        if all(s == 0 for s in scales):
            continue
        # synthetic division of Z(X) by (X - j), highest coefficient first
        quotient = [FR(0)] * n
        carry = FR(0)
        for i in range(n, 0, -1):
            carry = z[i] + carry * j
            quotient[i - 1] = carry
        for out, scale in zip(results, scales):
            if scale == 0:
                continue
            for i, q in enumerate(quotient):
                out[i] = out[i] + scale * q
    return results


def interpolate(values):
    return interpolate_many([values], len(values))[0]
